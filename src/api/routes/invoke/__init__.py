"""Rota de invocação de plugins."""
