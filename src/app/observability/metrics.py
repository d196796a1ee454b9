"""Registro de métricas via structured logging.

As métricas são logs estruturados (metric_type no extra) agregados
depois pela plataforma de logs.

Métricas suportadas:
- Latência: tempo de execução por plugin/operação
- Admissão: concessões, enfileiramentos e rejeições (backpressure)
- Idempotência: execuções, replays de cache e anexos a execução em voo
"""

from __future__ import annotations

import logging
from typing import Literal

logger = logging.getLogger(__name__)

AdmissionOutcome = Literal["granted", "queued", "rejected", "abandoned"]
IdempotencyOutcome = Literal["executed", "replayed", "joined"]


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    status_code: int | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente ou plugin (ex: "audio.dialogue")
        operation: Nome da operação (ex: "chat")
        latency_ms: Latência em milissegundos
        status_code: Status do resultado (quando aplicável)
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "status_code": status_code,
        },
    )


def record_admission(
    plugin: str,
    outcome: AdmissionOutcome,
    *,
    global_in_flight: int,
    plugin_in_flight: int,
    queued: int,
    waited_ms: float | None = None,
) -> None:
    """Registra decisão do AdmissionController."""
    extra: dict[str, object] = {
        "metric_type": "admission",
        "plugin": plugin,
        "outcome": outcome,
        "global_in_flight": global_in_flight,
        "plugin_in_flight": plugin_in_flight,
        "queued": queued,
    }
    if waited_ms is not None:
        extra["waited_ms"] = round(waited_ms, 2)
    level = logging.WARNING if outcome == "rejected" else logging.DEBUG
    logger.log(level, "metric_admission", extra=extra)


def record_idempotency(plugin: str, outcome: IdempotencyOutcome) -> None:
    """Registra desfecho da verificação de idempotência."""
    logger.info(
        "metric_idempotency",
        extra={
            "metric_type": "idempotency",
            "plugin": plugin,
            "outcome": outcome,
        },
    )
