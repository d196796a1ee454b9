"""Store remoto de conversas via HTTP (API de conversations).

Operações:
    POST   /conversations            {metadata}  -> {id, metadata}
    GET    /conversations/{id}                   -> {id, metadata}
    POST   /conversations/{id}       {metadata}  (metadados completos)
    DELETE /conversations/{id}

404 em fetch/update/delete -> ConversationNotFoundError.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any

import httpx

from app.infra.http._responses import ensure_success, unreachable
from app.protocols import ConversationStoreProtocol, RemoteConversation
from utils.errors import ConversationNotFoundError

logger = logging.getLogger(__name__)

_UPSTREAM = "conversation_store"


class HttpConversationStore(ConversationStoreProtocol):
    """Cliente httpx do store remoto de conversas (Bearer auth)."""

    __slots__ = ("_api_key", "_base_url", "_http_client")

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        http_client: httpx.AsyncClient,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._http_client = http_client

    def _url(self, conversation_id: str | None = None) -> str:
        if conversation_id is None:
            return f"{self._base_url}/conversations"
        return f"{self._base_url}/conversations/{conversation_id}"

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    async def _send(
        self,
        method: str,
        url: str,
        *,
        body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        try:
            return await self._http_client.request(method, url, headers=self._headers, json=body)
        except httpx.HTTPError as exc:
            logger.warning(
                "conversation_store_unreachable",
                extra={"method": method, "error_type": type(exc).__name__},
            )
            raise unreachable(_UPSTREAM, exc) from exc

    async def create(self, metadata: dict[str, str]) -> RemoteConversation:
        payload = {key: value for key, value in metadata.items() if value is not None}
        response = await self._send("POST", self._url(), body={"metadata": payload})
        data = ensure_success(response, upstream=_UPSTREAM) or {}
        conversation_id = data.get("id") if isinstance(data, dict) else None
        if not isinstance(conversation_id, str) or not conversation_id:
            conversation_id = str(uuid.uuid4())
            logger.warning("conversation_store_missing_id")
        remote_meta = data.get("metadata") if isinstance(data, dict) else None
        return RemoteConversation(
            conversation_id=conversation_id,
            metadata=_stringify(remote_meta) if isinstance(remote_meta, dict) else dict(payload),
        )

    async def fetch(self, conversation_id: str) -> RemoteConversation:
        response = await self._send("GET", self._url(conversation_id))
        if response.status_code == 404:
            raise ConversationNotFoundError(conversation_id)
        data = ensure_success(response, upstream=_UPSTREAM) or {}
        raw_meta = data.get("metadata") if isinstance(data, dict) else None
        return RemoteConversation(
            conversation_id=conversation_id,
            metadata=_stringify(raw_meta) if isinstance(raw_meta, dict) else {},
        )

    async def update(self, conversation_id: str, metadata: dict[str, str]) -> None:
        payload = {key: value for key, value in metadata.items() if value is not None}
        response = await self._send("POST", self._url(conversation_id), body={"metadata": payload})
        if response.status_code == 404:
            raise ConversationNotFoundError(conversation_id)
        ensure_success(response, upstream=_UPSTREAM)

    async def delete(self, conversation_id: str) -> None:
        response = await self._send("DELETE", self._url(conversation_id))
        if response.status_code == 404:
            raise ConversationNotFoundError(conversation_id)
        ensure_success(response, upstream=_UPSTREAM)
        logger.debug("conversation_deleted", extra={"conversation_id": conversation_id})


def _stringify(raw: dict[str, Any]) -> dict[str, str]:
    """Metadados remotos são string->string; valores não-string viram JSON."""
    metadata: dict[str, str] = {}
    for key, value in raw.items():
        if value is None:
            continue
        metadata[str(key)] = value if isinstance(value, str) else json.dumps(value)
    return metadata
