"""Endpoint único de invocação: POST /v1/invoke.

Fluxo:
1. Lê corpo bruto (a assinatura pode cobrir o corpo)
2. Define correlation_id (x-correlation-id ou x-request-id)
3. Delega ao Dispatcher
4. Status HTTP = status_code do resultado uniforme

Headers de resposta:
- x-correlation-id: sempre
- x-idempotent-replay: "true" quando a resposta veio do cache
- Retry-After: em 429 (capacidade esgotada)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.observability import request_context
from app.protocols import HandlerResult
from utils.errors import AdmissionRejectedError, GatewayError, InternalError

if TYPE_CHECKING:
    from app.gateway import Dispatcher

logger = logging.getLogger(__name__)

router = APIRouter()

REPLAY_HEADER = "x-idempotent-replay"
CORRELATION_HEADER = "x-correlation-id"


def _result_response(
    result: HandlerResult,
    correlation_id: str,
    extra_headers: dict[str, str] | None = None,
) -> JSONResponse:
    headers = {CORRELATION_HEADER: correlation_id, **(extra_headers or {})}
    return JSONResponse(content=result.to_dict(), status_code=result.status_code, headers=headers)


@router.post("/v1/invoke", response_model=None)
async def invoke(request: Request) -> JSONResponse:
    """Invoca o plugin nomeado no envelope.

    Returns:
        Resultado uniforme {status_code, message, data?, partial?}.
    """
    raw_body = await request.body()
    headers = dict(request.headers)
    requested_id = headers.get(CORRELATION_HEADER) or headers.get("x-request-id")

    with request_context(correlation_id=requested_id) as correlation_id:
        dispatcher: Dispatcher | None = getattr(request.app.state, "dispatcher", None)
        if dispatcher is None:
            logger.error("dispatcher_not_ready")
            return _result_response(
                HandlerResult(status_code=503, message="service not ready", data={}),
                correlation_id,
            )

        try:
            outcome = await dispatcher.handle(raw_body, headers)
        except AdmissionRejectedError as exc:
            return _result_response(
                HandlerResult.from_error(exc),
                correlation_id,
                {"Retry-After": str(exc.retry_after_seconds)},
            )
        except GatewayError as exc:
            logger.info(
                "invoke_rejected",
                extra={"kind": exc.kind, "status_code": exc.status_code},
            )
            return _result_response(HandlerResult.from_error(exc), correlation_id)
        except Exception:
            logger.exception("invoke_unexpected_error")
            return _result_response(
                HandlerResult.from_error(InternalError("internal error")),
                correlation_id,
            )

        extra = {REPLAY_HEADER: "true"} if outcome.replayed else None
        return _result_response(outcome.result, correlation_id, extra)
