"""App — coração do sistema: gateway, handlers e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- gateway/: autenticação, admissão, idempotência e dispatch
- handlers/: plugins registrados (echo, audio.dialogue, data.proxy, auth)
- conversations/: ciclo de vida de conversas multi-turno
- infra/: implementações concretas de IO (http, stores, ai, crypto)
- protocols/: contratos/interfaces
- observability/: contexto de requisição e métricas via logs

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
