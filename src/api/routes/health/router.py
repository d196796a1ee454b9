"""Endpoints de health check (liveness e readiness)."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_NAME = "intent-gateway"


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de checagem de dependência."""

    status: Literal["ok", "degraded", "failed", "skipped"]
    latency_ms: float | None = None
    error: str | None = None
    details: dict[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "status": self.status,
            "latency_ms": self.latency_ms,
            "error": self.error,
        }
        if self.details is not None:
            payload["details"] = self.details
        return payload


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe — verifica se o serviço está rodando."""
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe com verificação real de dependências."""
    state = request.app.state
    redis_check, openai_check = await asyncio.gather(
        _check_redis(getattr(state, "redis_client", None)),
        _check_openai(getattr(state, "openai_client", None)),
    )
    admission_check = _check_admission(getattr(state, "dispatcher", None))

    ready = admission_check.status != "failed" and redis_check.status in {"ok", "skipped"}

    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {
            "admission": admission_check.as_dict(),
            "redis": redis_check.as_dict(),
            "openai": openai_check.as_dict(),
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


def _check_admission(dispatcher: Any | None) -> DependencyCheck:
    if dispatcher is None:
        return DependencyCheck(status="failed", error="not_configured")
    snapshot = dispatcher.admission.snapshot()
    details = {
        "global_in_flight": snapshot.global_in_flight,
        "queued": snapshot.queued,
        "per_handler": snapshot.per_handler,
        "handlers": dispatcher.registry.names(),
    }
    # Fila não vazia: saturado, mas ainda atendendo
    status: Literal["ok", "degraded"] = "degraded" if snapshot.queued else "ok"
    return DependencyCheck(status=status, details=details)


async def _check_redis(redis_client: Any | None) -> DependencyCheck:
    if redis_client is None:
        # Backend de idempotência em memória
        return DependencyCheck(status="skipped")
    started_at = time.perf_counter()
    try:
        await asyncio.wait_for(redis_client.ping(), timeout=2.0)
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout")
    except Exception as exc:
        return DependencyCheck(status="failed", error=type(exc).__name__)
    latency_ms = (time.perf_counter() - started_at) * 1000
    return DependencyCheck(status="ok", latency_ms=round(latency_ms, 2))


async def _check_openai(openai_client: Any | None) -> DependencyCheck:
    if openai_client is None:
        return DependencyCheck(status="degraded", error="not_configured")
    started_at = time.perf_counter()
    try:
        await asyncio.wait_for(openai_client.models.list(), timeout=5.0)
    except TimeoutError:
        return DependencyCheck(status="degraded", error="timeout")
    except Exception as exc:
        logger.warning("readiness_openai_check_failed", extra={"error_type": type(exc).__name__})
        return DependencyCheck(status="degraded", error=type(exc).__name__)
    latency_ms = (time.perf_counter() - started_at) * 1000
    return DependencyCheck(status="ok", latency_ms=round(latency_ms, 2))
