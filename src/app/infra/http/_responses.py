"""Tradução de respostas httpx para a taxonomia de erros."""

from __future__ import annotations

import json
from typing import Any

import httpx

from utils.errors import UpstreamError

# Corpo de erro repassado ao cliente é truncado
_MAX_ERROR_TEXT = 500


def decode_body(response: httpx.Response) -> Any:
    """JSON quando possível; texto (truncado) caso contrário; None se vazio."""
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        text = response.text
        return text[:_MAX_ERROR_TEXT]


def ensure_success(response: httpx.Response, *, upstream: str) -> Any:
    """Devolve o corpo decodificado ou levanta UpstreamError com o status.

    Raises:
        UpstreamError: status >= 400 (status < 500 é repassado ao cliente)
    """
    if response.is_success:
        return decode_body(response)
    raise UpstreamError(
        f"{upstream} responded {response.status_code}",
        upstream_status=response.status_code,
        details={"upstream": upstream, "body": decode_body(response)},
    )


def unreachable(upstream: str, exc: httpx.HTTPError) -> UpstreamError:
    """Erro de transporte (timeout, conexão recusada) -> 502."""
    kind = "timeout" if isinstance(exc, httpx.TimeoutException) else "unreachable"
    return UpstreamError(
        f"{upstream} {kind}",
        details={"upstream": upstream, "error_type": type(exc).__name__},
    )
