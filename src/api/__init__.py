"""API — camada de borda HTTP.

Responsabilidades:
- Receber requests (POST /v1/invoke)
- Traduzir resultados e erros em respostas HTTP
- Health checks e readiness

Subpastas:
- routes/: endpoints HTTP (invoke, health)

NÃO PODE conter: autenticação, admissão, idempotência ou regras de handlers.
"""
