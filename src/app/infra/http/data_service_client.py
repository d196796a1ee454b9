"""Cliente HTTP do serviço de dados (lectures)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.infra.http._responses import ensure_success, unreachable

logger = logging.getLogger(__name__)

_UPSTREAM = "data_service"


class DataServiceClient:
    """Encaminha requisições ao serviço de dados com identidade do chamador.

    Headers enviados: x-user-id e x-request-id (rastreamento ponta a ponta).
    """

    __slots__ = ("_base_url", "_http_client")

    def __init__(self, *, base_url: str, http_client: httpx.AsyncClient) -> None:
        self._base_url = base_url.rstrip("/")
        self._http_client = http_client

    async def request(
        self,
        method: str,
        path: str,
        *,
        user_id: str,
        request_id: str,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """Executa a chamada e devolve o corpo decodificado.

        Raises:
            UpstreamError: status de erro ou falha de transporte
        """
        headers = {"x-user-id": user_id, "x-request-id": request_id}
        try:
            response = await self._http_client.request(
                method,
                f"{self._base_url}{path}",
                headers=headers,
                json=body,
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "data_service_unreachable",
                extra={"method": method, "error_type": type(exc).__name__},
            )
            raise unreachable(_UPSTREAM, exc) from exc

        logger.debug(
            "data_service_response",
            extra={"method": method, "status_code": response.status_code},
        )
        return ensure_success(response, upstream=_UPSTREAM)
