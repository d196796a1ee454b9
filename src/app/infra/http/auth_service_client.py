"""Cliente HTTP do serviço de autenticação."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.infra.http._responses import ensure_success, unreachable

logger = logging.getLogger(__name__)

_UPSTREAM = "auth_service"


class AuthServiceClient:
    """Envia credenciais para login/registro no serviço de autenticação."""

    __slots__ = ("_base_url", "_http_client")

    def __init__(self, *, base_url: str, http_client: httpx.AsyncClient) -> None:
        self._base_url = base_url.rstrip("/")
        self._http_client = http_client

    async def post_credentials(self, path: str, username: str, password: str) -> Any:
        """POST {username, password}; devolve o corpo (dict vazio se vazio).

        Raises:
            UpstreamError: status de erro ou falha de transporte
        """
        try:
            response = await self._http_client.post(
                f"{self._base_url}{path}",
                json={"username": username, "password": password},
            )
        except httpx.HTTPError as exc:
            logger.warning("auth_service_unreachable", extra={"error_type": type(exc).__name__})
            raise unreachable(_UPSTREAM, exc) from exc

        data = ensure_success(response, upstream=_UPSTREAM)
        return {} if data is None else data
