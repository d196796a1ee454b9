"""Testes do Admission Controller."""

from __future__ import annotations

import asyncio

import pytest

from app.gateway.admission import AdmissionController, TicketAlreadyReleasedError
from utils.errors import AdmissionRejectedError


async def _settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


class TestImmediateGrant:
    """Concessão imediata e limites."""

    @pytest.mark.asyncio
    async def test_grants_within_limits(self) -> None:
        controller = AdmissionController(4, per_handler={"echo": 2})
        ticket = await controller.acquire("echo")
        assert ticket.handler_name == "echo"
        assert controller.global_in_flight == 1
        assert controller.in_flight("echo") == 1
        controller.release(ticket)
        assert controller.global_in_flight == 0
        assert controller.in_flight("echo") == 0

    @pytest.mark.asyncio
    async def test_per_handler_limit_does_not_block_other_handlers(self) -> None:
        controller = AdmissionController(4, per_handler={"slow": 1})
        slow = await controller.acquire("slow")
        other = await asyncio.wait_for(controller.acquire("echo"), timeout=0.5)
        assert controller.snapshot().per_handler == {"slow": 1, "echo": 1}
        controller.release(slow)
        controller.release(other)

    def test_rejects_invalid_limits(self) -> None:
        with pytest.raises(ValueError):
            AdmissionController(0)

    def test_limit_for_uses_default(self) -> None:
        controller = AdmissionController(4, per_handler={"a": 1}, per_handler_default=3)
        assert controller.limit_for("a") == 1
        assert controller.limit_for("b") == 3


class TestQueueing:
    """Fila FIFO com timeout."""

    @pytest.mark.asyncio
    async def test_n_plus_one_waits_until_release(self) -> None:
        controller = AdmissionController(2, per_handler_default=2, queue_timeout_seconds=1.0)
        first = await controller.acquire("echo")
        second = await controller.acquire("echo")

        third_task = asyncio.create_task(controller.acquire("echo"))
        await _settle()
        assert not third_task.done()
        assert controller.queued == 1
        assert controller.global_in_flight == 2

        controller.release(first)
        third = await asyncio.wait_for(third_task, timeout=0.5)
        assert controller.global_in_flight == 2
        assert controller.queued == 0

        controller.release(second)
        controller.release(third)
        assert controller.snapshot().global_in_flight == 0

    @pytest.mark.asyncio
    async def test_waiters_are_served_in_fifo_order(self) -> None:
        controller = AdmissionController(1, queue_timeout_seconds=1.0)
        holder = await controller.acquire("echo")
        order: list[int] = []

        async def waiter(index: int) -> None:
            async with controller.admit("echo"):
                order.append(index)
                await asyncio.sleep(0)

        tasks = [asyncio.create_task(waiter(i)) for i in range(3)]
        await _settle()
        controller.release(holder)
        await asyncio.wait_for(asyncio.gather(*tasks), timeout=1.0)

        assert order == [0, 1, 2]
        assert controller.global_in_flight == 0

    @pytest.mark.asyncio
    async def test_new_arrival_does_not_overtake_queued_waiter(self) -> None:
        controller = AdmissionController(4, per_handler={"echo": 1}, queue_timeout_seconds=1.0)
        holder = await controller.acquire("echo")
        queued = asyncio.create_task(controller.acquire("echo"))
        await _settle()

        controller.release(holder)
        late = asyncio.create_task(controller.acquire("echo"))
        first = await asyncio.wait_for(queued, timeout=0.5)
        await _settle()
        assert not late.done()

        controller.release(first)
        controller.release(await asyncio.wait_for(late, timeout=0.5))

    @pytest.mark.asyncio
    async def test_queue_timeout_rejects_with_retry_after(self) -> None:
        controller = AdmissionController(1, queue_timeout_seconds=0.05)
        holder = await controller.acquire("echo")

        with pytest.raises(AdmissionRejectedError) as exc_info:
            await controller.acquire("echo")

        assert exc_info.value.status_code == 429
        assert exc_info.value.retry_after_seconds >= 1
        assert exc_info.value.message == "admission queue timeout"
        assert controller.queued == 0
        controller.release(holder)
        assert controller.global_in_flight == 0

    @pytest.mark.asyncio
    async def test_full_queue_rejects_immediately(self) -> None:
        controller = AdmissionController(1, max_queue=1, queue_timeout_seconds=1.0)
        holder = await controller.acquire("echo")
        waiting = asyncio.create_task(controller.acquire("echo"))
        await _settle()

        with pytest.raises(AdmissionRejectedError, match="capacity exhausted"):
            await controller.acquire("echo")

        controller.release(holder)
        controller.release(await asyncio.wait_for(waiting, timeout=0.5))

    @pytest.mark.asyncio
    async def test_zero_queue_rejects_at_capacity(self) -> None:
        controller = AdmissionController(1, max_queue=0)
        holder = await controller.acquire("echo")
        with pytest.raises(AdmissionRejectedError):
            await controller.acquire("other")
        controller.release(holder)


class TestRelease:
    """Release exatamente uma vez em qualquer caminho."""

    @pytest.mark.asyncio
    async def test_double_release_raises(self) -> None:
        controller = AdmissionController(1)
        ticket = await controller.acquire("echo")
        controller.release(ticket)
        with pytest.raises(TicketAlreadyReleasedError):
            controller.release(ticket)
        assert controller.global_in_flight == 0

    @pytest.mark.asyncio
    async def test_admit_releases_on_exception(self) -> None:
        controller = AdmissionController(1)
        with pytest.raises(RuntimeError):
            async with controller.admit("echo"):
                raise RuntimeError("boom")
        assert controller.global_in_flight == 0
        assert controller.in_flight("echo") == 0

    @pytest.mark.asyncio
    async def test_cancelled_waiter_never_holds_a_slot(self) -> None:
        controller = AdmissionController(1, queue_timeout_seconds=5.0)
        holder = await controller.acquire("echo")
        waiting = asyncio.create_task(controller.acquire("echo"))
        await _settle()

        waiting.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiting
        assert controller.queued == 0

        controller.release(holder)
        assert controller.global_in_flight == 0

    @pytest.mark.asyncio
    async def test_cancel_during_admit_releases(self) -> None:
        controller = AdmissionController(1)
        entered = asyncio.Event()

        async def worker() -> None:
            async with controller.admit("echo"):
                entered.set()
                await asyncio.sleep(10)

        task = asyncio.create_task(worker())
        await asyncio.wait_for(entered.wait(), timeout=0.5)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert controller.global_in_flight == 0

    @pytest.mark.asyncio
    async def test_counters_return_to_zero_after_burst(self) -> None:
        controller = AdmissionController(3, per_handler_default=2, queue_timeout_seconds=2.0)
        peak = 0

        async def worker(name: str) -> None:
            nonlocal peak
            async with controller.admit(name):
                peak = max(peak, controller.global_in_flight)
                await asyncio.sleep(0.01)

        names = ["a", "b", "c"] * 5
        await asyncio.wait_for(asyncio.gather(*(worker(n) for n in names)), timeout=2.0)

        assert peak <= 3
        snapshot = controller.snapshot()
        assert snapshot.global_in_flight == 0
        assert snapshot.per_handler == {}
        assert snapshot.queued == 0
