"""Contrato uniforme entre Dispatcher e handlers de plugin.

Todo handler recebe apenas HandlerContext (operation, inputs, user_id,
request_id) e devolve HandlerResult. Erros esperados (validação, recurso
inexistente, falha de upstream) são traduzidos pelo próprio handler;
o Dispatcher só atua como rede de segurança para falhas inesperadas.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from utils.errors import GatewayError


@dataclass(frozen=True, slots=True)
class HandlerContext:
    """Contexto exposto a um handler (nada além destes campos)."""

    operation: str
    inputs: dict[str, Any] = field(default_factory=dict)
    user_id: str = ""
    request_id: str = ""


@dataclass(frozen=True, slots=True)
class HandlerResult:
    """Resultado uniforme devolvido por todo handler.

    Attributes:
        status_code: Status numérico (semântica HTTP)
        message: Mensagem legível
        data: Payload opcional
        partial: Marca resultado parcial (opcional)
    """

    status_code: int
    message: str
    data: Any = None
    partial: bool | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def to_dict(self) -> dict[str, Any]:
        """Serializa no formato de resposta (campos opcionais omitidos)."""
        payload: dict[str, Any] = {
            "status_code": self.status_code,
            "message": self.message,
        }
        if self.data is not None:
            payload["data"] = self.data
        if self.partial is not None:
            payload["partial"] = self.partial
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> HandlerResult:
        return cls(
            status_code=int(payload["status_code"]),
            message=str(payload.get("message", "")),
            data=payload.get("data"),
            partial=payload.get("partial"),
        )

    @classmethod
    def success(cls, data: Any = None, message: str = "ok") -> HandlerResult:
        return cls(status_code=200, message=message, data=data)

    @classmethod
    def from_error(cls, error: GatewayError) -> HandlerResult:
        """Traduz um erro da taxonomia para o formato uniforme."""
        data = error.details if error.details is not None else {}
        return cls(status_code=error.status_code, message=error.message, data=data)


class Handler(Protocol):
    """Capacidade única de um handler de plugin."""

    async def execute(self, context: HandlerContext) -> HandlerResult: ...
