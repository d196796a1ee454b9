"""Handler de diagnóstico: devolve os inputs recebidos."""

from __future__ import annotations

from app.protocols import HandlerContext, HandlerResult

ECHO_HANDLER_NAME = "echo"


class EchoHandler:
    """Devolve {status_code: 200, message: "ok", data: inputs}."""

    async def execute(self, context: HandlerContext) -> HandlerResult:
        return HandlerResult.success(dict(context.inputs))
