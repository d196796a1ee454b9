"""Dispatcher — orquestra uma requisição de ponta a ponta.

Fluxo:
    SignatureGate.verify -> parse_envelope -> AdmissionController.admit
    -> IdempotencyCache.run -> HandlerRegistry.get -> handler.execute
    -> resultado armazenado -> ticket liberado

Falhas antes da admissão (AuthError, ValidationError, AdmissionRejectedError)
propagam para a camada HTTP. Depois da admissão, toda falha do handler vira
HandlerResult uniforme e é armazenada no cache como qualquer resultado.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.gateway.envelope import parse_envelope
from app.gateway.idempotency import idempotency_key
from app.observability import plugin_context, record_latency
from app.protocols import HandlerContext, HandlerResult
from config.logging import log_recovered_failure
from utils.errors import GatewayError, HandlerNotFoundError, InternalError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.gateway.admission import AdmissionController
    from app.gateway.envelope import Envelope
    from app.gateway.idempotency import IdempotencyCache
    from app.gateway.registry import HandlerRegistry
    from app.gateway.signature import SignatureGate

logger = logging.getLogger(__name__)

DEFAULT_HANDLER_TIMEOUT_SECONDS = 120.0


@dataclass(frozen=True, slots=True)
class DispatchOutcome:
    """Resultado de uma requisição despachada."""

    result: HandlerResult
    replayed: bool = False


class Dispatcher:
    """Ponto único de entrada do core do gateway."""

    def __init__(
        self,
        *,
        gate: SignatureGate,
        admission: AdmissionController,
        cache: IdempotencyCache,
        registry: HandlerRegistry,
        handler_timeout_seconds: float = DEFAULT_HANDLER_TIMEOUT_SECONDS,
    ) -> None:
        self._gate = gate
        self._admission = admission
        self._cache = cache
        self._registry = registry
        self._handler_timeout_seconds = handler_timeout_seconds

    @property
    def admission(self) -> AdmissionController:
        return self._admission

    @property
    def registry(self) -> HandlerRegistry:
        return self._registry

    async def handle(self, raw_body: bytes, headers: Mapping[str, str]) -> DispatchOutcome:
        """Processa uma requisição bruta.

        Raises:
            AuthError: assinatura inválida (nada é admitido)
            ValidationError: envelope malformado (nada é admitido)
            AdmissionRejectedError: capacidade esgotada
        """
        caller = self._gate.verify(raw_body, headers)
        envelope = parse_envelope(raw_body, headers, caller)
        key = idempotency_key(envelope.user_id, envelope.handler_name, envelope.request_id)

        started = time.perf_counter()
        with plugin_context(envelope.handler_name):
            # Admissão usa o nome declarado, mesmo que não registrado
            async with self._admission.admit(envelope.handler_name):
                result, replayed = await self._cache.run(
                    key,
                    lambda: self._execute(envelope),
                    plugin=envelope.handler_name,
                )

            logger.info(
                "dispatch_completed",
                extra={
                    "operation": envelope.operation,
                    "status_code": result.status_code,
                    "replayed": replayed,
                    "latency_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
        return DispatchOutcome(result=result, replayed=replayed)

    async def _execute(self, envelope: Envelope) -> HandlerResult:
        try:
            handler = self._registry.get(envelope.handler_name)
        except HandlerNotFoundError as exc:
            logger.info("handler_not_found", extra={"operation": envelope.operation})
            return HandlerResult.from_error(exc)

        context = HandlerContext(
            operation=envelope.operation,
            inputs=envelope.inputs,
            user_id=envelope.user_id,
            request_id=envelope.request_id,
        )
        started = time.perf_counter()
        try:
            result = await asyncio.wait_for(
                handler.execute(context),
                timeout=self._handler_timeout_seconds,
            )
            if not isinstance(result, HandlerResult):
                raise TypeError(f"handler returned {type(result).__name__}")
        except TimeoutError:
            result = HandlerResult(status_code=504, message="handler timeout", data={})
            log_recovered_failure(
                logger, envelope.handler_name, "handler_timeout", 504, _elapsed_ms(started)
            )
        except GatewayError as exc:
            result = HandlerResult.from_error(exc)
            log_recovered_failure(
                logger, envelope.handler_name, exc.kind, result.status_code, _elapsed_ms(started)
            )
        except Exception as exc:
            logger.exception(
                "handler_unexpected_error",
                extra={"operation": envelope.operation, "error_type": type(exc).__name__},
            )
            result = HandlerResult.from_error(InternalError("internal error"))

        record_latency(
            envelope.handler_name, envelope.operation, _elapsed_ms(started), result.status_code
        )
        return result


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
