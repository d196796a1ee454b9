"""Handler Registry — mapa nome -> handler.

Montado uma vez no startup e congelado; depois disso é somente leitura.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from utils.errors import HandlerNotFoundError

if TYPE_CHECKING:
    from app.protocols import Handler

logger = logging.getLogger(__name__)


class DuplicateHandlerError(ValueError):
    """Nome de handler registrado mais de uma vez."""


class RegistryFrozenError(RuntimeError):
    """Tentativa de registrar handler após o congelamento."""


class HandlerRegistry:
    """Registro explícito de handlers por nome."""

    __slots__ = ("_frozen", "_handlers")

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, name: str, handler: Handler) -> None:
        if self._frozen:
            raise RegistryFrozenError(f"Registry congelado; não é possível registrar {name!r}")
        if not name:
            raise ValueError("Nome de handler não pode ser vazio")
        if name in self._handlers:
            raise DuplicateHandlerError(f"Handler já registrado: {name!r}")
        self._handlers[name] = handler

    def freeze(self) -> None:
        self._frozen = True
        logger.info("handler_registry_frozen", extra={"handlers": self.names()})

    def get(self, name: str) -> Handler:
        """Resolve o handler.

        Raises:
            HandlerNotFoundError: nome desconhecido.
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise HandlerNotFoundError(name)
        return handler

    def names(self) -> list[str]:
        return sorted(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)
