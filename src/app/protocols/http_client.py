"""Protocolos HTTP usados pelos handlers.

Evita dependência direta da camada infra.
"""

from __future__ import annotations

from typing import Any, Protocol


class DataServiceClientProtocol(Protocol):
    """Contrato mínimo para o serviço de dados (lectures)."""

    async def request(
        self,
        method: str,
        path: str,
        *,
        user_id: str,
        request_id: str,
        body: dict[str, Any] | None = None,
    ) -> Any: ...


class AuthServiceClientProtocol(Protocol):
    """Contrato mínimo para o serviço de autenticação."""

    async def post_credentials(
        self,
        path: str,
        username: str,
        password: str,
    ) -> Any: ...
