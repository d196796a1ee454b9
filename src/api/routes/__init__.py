"""Rotas HTTP da API — adapters de entrada.

Responsabilidades:
- Definir endpoints HTTP (invoke, health)
- Traduzir erros da taxonomia em respostas HTTP
- Delegação para o Dispatcher

Estrutura:
- routes/invoke/: POST /v1/invoke
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
