"""Contexto de requisição para rastreamento (correlation_id e plugin).

Ambos são propagados via ContextVar (async-safe) e injetados nos logs
pelo RequestContextFilter.

Uso:
    from app.observability import request_context

    with request_context(correlation_id=request_id, plugin="echo"):
        ...  # logs deste bloco carregam correlation_id e plugin
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")
_plugin: ContextVar[str] = ContextVar("plugin", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual ("" se não definido)."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id no contexto atual.

    Args:
        correlation_id: ID a definir. Se None, gera um novo UUID.

    Returns:
        Token para reset posterior via reset_correlation_id().
    """
    value = correlation_id or generate_correlation_id()
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str]) -> None:
    """Restaura o correlation_id ao valor anterior."""
    _correlation_id.reset(token)


def get_plugin() -> str:
    """Retorna o nome do plugin em execução no contexto atual."""
    return _plugin.get()


def get_log_context() -> dict[str, str]:
    """Campos de contexto injetados em todo record de log."""
    return {"correlation_id": _correlation_id.get(), "plugin": _plugin.get()}


@contextmanager
def request_context(
    correlation_id: str | None = None,
    plugin: str = "",
) -> Iterator[str]:
    """Escopo de requisição: define e restaura correlation_id e plugin.

    Yields:
        correlation_id efetivo.
    """
    corr_token = set_correlation_id(correlation_id)
    plugin_token = _plugin.set(plugin)
    try:
        yield _correlation_id.get()
    finally:
        _plugin.reset(plugin_token)
        reset_correlation_id(corr_token)


@contextmanager
def plugin_context(plugin: str) -> Iterator[None]:
    """Marca o plugin em execução dentro de um request_context já aberto."""
    token = _plugin.set(plugin)
    try:
        yield
    finally:
        _plugin.reset(token)


def generate_correlation_id() -> str:
    """Gera um novo correlation_id (UUID v4)."""
    return str(uuid.uuid4())
