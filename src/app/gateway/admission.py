"""Admission Controller — limite de execuções simultâneas.

Dois contadores: global e por nome de handler, cada um com seu limite.

Política: fila FIFO limitada com timeout.
- Concede na hora quando há vaga global e vaga para o handler e não há
  waiter anterior do mesmo handler na fila.
- Caso contrário enfileira (se a fila tiver espaço) e espera até
  `queue_timeout_seconds`; estourou -> AdmissionRejectedError.
- Fila cheia (max_queue=0 desativa a fila) -> AdmissionRejectedError imediato.
- A cada release a fila é percorrida em ordem FIFO e todo waiter elegível é
  atendido; waiter bloqueado só pelo limite do próprio handler não trava
  waiters de outros handlers.

Todas as mutações de estado acontecem em trechos síncronos (sem await) no
event loop, portanto são atômicas entre tasks. O controller pertence a um
único event loop.

Uso:
    async with controller.admit("audio.dialogue") as ticket:
        ...  # release garantido em retorno, exceção ou cancelamento
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import time
from collections import deque
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from app.observability import record_admission
from utils.errors import AdmissionRejectedError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from config.settings import ConcurrencySettings

logger = logging.getLogger(__name__)


class TicketAlreadyReleasedError(RuntimeError):
    """Release chamado duas vezes para o mesmo ticket."""


@dataclass(eq=False, slots=True)
class AdmissionTicket:
    """Vaga concedida para uma execução de handler."""

    handler_name: str
    ticket_id: int
    granted_at: float = field(default_factory=time.monotonic)
    released: bool = field(default=False, repr=False)


@dataclass(frozen=True, slots=True)
class AdmissionSnapshot:
    """Estado dos contadores em um instante."""

    global_in_flight: int
    per_handler: dict[str, int]
    queued: int


@dataclass(eq=False, slots=True)
class _Waiter:
    handler_name: str
    future: asyncio.Future[AdmissionTicket]


class AdmissionController:
    """Controle de admissão com limites global e por handler."""

    def __init__(
        self,
        global_limit: int,
        *,
        per_handler: dict[str, int] | None = None,
        per_handler_default: int = 8,
        max_queue: int = 128,
        queue_timeout_seconds: float = 10.0,
    ) -> None:
        if global_limit < 1 or per_handler_default < 1:
            raise ValueError("Limites de concorrência devem ser >= 1")
        self._global_limit = global_limit
        self._per_handler_limits = dict(per_handler or {})
        self._per_handler_default = per_handler_default
        self._max_queue = max(max_queue, 0)
        self._queue_timeout_seconds = queue_timeout_seconds

        self._global_in_flight = 0
        self._in_flight: dict[str, int] = {}
        self._waiters: deque[_Waiter] = deque()
        self._ticket_ids = itertools.count(1)

    @classmethod
    def from_settings(cls, settings: ConcurrencySettings) -> AdmissionController:
        return cls(
            settings.global_limit,
            per_handler=settings.per_handler,
            per_handler_default=settings.per_handler_default,
            max_queue=settings.max_queue,
            queue_timeout_seconds=settings.queue_timeout_seconds,
        )

    # ──────────────────────────────────────────────────────────────
    # Introspecção
    # ──────────────────────────────────────────────────────────────

    @property
    def global_in_flight(self) -> int:
        return self._global_in_flight

    @property
    def queued(self) -> int:
        return len(self._waiters)

    def in_flight(self, handler_name: str) -> int:
        return self._in_flight.get(handler_name, 0)

    def limit_for(self, handler_name: str) -> int:
        return self._per_handler_limits.get(handler_name, self._per_handler_default)

    def snapshot(self) -> AdmissionSnapshot:
        return AdmissionSnapshot(
            global_in_flight=self._global_in_flight,
            per_handler=dict(self._in_flight),
            queued=len(self._waiters),
        )

    # ──────────────────────────────────────────────────────────────
    # API pública
    # ──────────────────────────────────────────────────────────────

    @asynccontextmanager
    async def admit(
        self,
        handler_name: str,
        *,
        timeout: float | None = None,
    ) -> AsyncIterator[AdmissionTicket]:
        """Adquire um ticket e garante o release em qualquer saída."""
        ticket = await self.acquire(handler_name, timeout=timeout)
        try:
            yield ticket
        finally:
            self.release(ticket)

    async def acquire(
        self,
        handler_name: str,
        *,
        timeout: float | None = None,
    ) -> AdmissionTicket:
        """Obtém uma vaga para `handler_name`.

        Prefira `admit()`; quem chama `acquire` diretamente é responsável
        por chamar `release` exatamente uma vez.

        Raises:
            AdmissionRejectedError: fila cheia ou timeout na fila.
        """
        if self._has_capacity(handler_name) and not self._has_waiter_for(handler_name):
            ticket = self._grant(handler_name)
            self._record(handler_name, "granted")
            return ticket

        if len(self._waiters) >= self._max_queue:
            self._record(handler_name, "rejected")
            raise AdmissionRejectedError(
                "capacity exhausted",
                handler_name=handler_name,
                retry_after_seconds=1,
            )

        waiter = _Waiter(handler_name, asyncio.get_running_loop().create_future())
        self._waiters.append(waiter)
        self._record(handler_name, "queued")

        wait_seconds = self._queue_timeout_seconds if timeout is None else timeout
        started = time.perf_counter()
        try:
            async with asyncio.timeout(wait_seconds):
                ticket = await waiter.future
        except TimeoutError:
            self._abandon(waiter)
            self._record(handler_name, "rejected", waited_ms=_elapsed_ms(started))
            raise AdmissionRejectedError(
                "admission queue timeout",
                handler_name=handler_name,
                retry_after_seconds=max(int(wait_seconds), 1),
            ) from None
        except BaseException:
            # Cancelamento (cliente desconectou, timeout externo)
            self._abandon(waiter)
            self._record(handler_name, "abandoned", waited_ms=_elapsed_ms(started))
            raise

        self._record(handler_name, "granted", waited_ms=_elapsed_ms(started))
        return ticket

    def release(self, ticket: AdmissionTicket) -> None:
        """Devolve a vaga e atende waiters elegíveis.

        Raises:
            TicketAlreadyReleasedError: ticket já devolvido.
        """
        if ticket.released:
            raise TicketAlreadyReleasedError(
                f"Ticket {ticket.ticket_id} ({ticket.handler_name}) já liberado"
            )
        ticket.released = True
        self._global_in_flight -= 1
        remaining = self._in_flight.get(ticket.handler_name, 0) - 1
        if remaining > 0:
            self._in_flight[ticket.handler_name] = remaining
        else:
            self._in_flight.pop(ticket.handler_name, None)
        self._drain()

    # ──────────────────────────────────────────────────────────────
    # Internos (síncronos: atômicos no event loop)
    # ──────────────────────────────────────────────────────────────

    def _has_capacity(self, handler_name: str) -> bool:
        return (
            self._global_in_flight < self._global_limit
            and self.in_flight(handler_name) < self.limit_for(handler_name)
        )

    def _has_waiter_for(self, handler_name: str) -> bool:
        return any(waiter.handler_name == handler_name for waiter in self._waiters)

    def _grant(self, handler_name: str) -> AdmissionTicket:
        self._global_in_flight += 1
        self._in_flight[handler_name] = self.in_flight(handler_name) + 1
        return AdmissionTicket(handler_name=handler_name, ticket_id=next(self._ticket_ids))

    def _drain(self) -> None:
        for waiter in list(self._waiters):
            if self._global_in_flight >= self._global_limit:
                break
            if waiter.future.done():
                self._waiters.remove(waiter)
                continue
            if self._has_capacity(waiter.handler_name):
                self._waiters.remove(waiter)
                waiter.future.set_result(self._grant(waiter.handler_name))

    def _abandon(self, waiter: _Waiter) -> None:
        """Remove waiter desistente sem nunca conceder depois."""
        try:
            self._waiters.remove(waiter)
        except ValueError:
            pass
        future = waiter.future
        if future.done() and not future.cancelled():
            # Concedido no mesmo tick em que desistiu: devolve a vaga
            self.release(future.result())
        else:
            future.cancel()

    def _record(self, handler_name: str, outcome: str, waited_ms: float | None = None) -> None:
        record_admission(
            handler_name,
            outcome,  # type: ignore[arg-type]
            global_in_flight=self._global_in_flight,
            plugin_in_flight=self.in_flight(handler_name),
            queued=len(self._waiters),
            waited_ms=waited_ms,
        )


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
