"""Testes do ConversationSessionManager."""

from __future__ import annotations

import asyncio
import logging

import pytest

from app.conversations import ConversationSessionManager
from utils.errors import ConversationNotFoundError, UpstreamError

from tests.fakes.fake_dialogue_client import FakeDialogueClient, FlakyConversationStore


@pytest.fixture
def store() -> FlakyConversationStore:
    return FlakyConversationStore()


@pytest.fixture
def dialogue() -> FakeDialogueClient:
    return FakeDialogueClient(delay=0.001)


@pytest.fixture
def manager(store, dialogue) -> ConversationSessionManager:
    return ConversationSessionManager(store, dialogue)


class TestStartConversation:
    """Início de conversa e limpeza compensatória."""

    @pytest.mark.asyncio
    async def test_start_creates_session_at_turn_one(self, manager, store, dialogue) -> None:
        exchange = await manager.start_conversation("en", "lecture notes", "hello?")

        assert exchange.answer == "start:hello?"
        assert exchange.turn == 1
        remote = await store.fetch(exchange.conversation_id)
        assert remote.metadata == {"language": "en", "turn": "1"}
        assert dialogue.started[0][1].summaries == "lecture notes"

    @pytest.mark.asyncio
    async def test_dialogue_failure_deletes_session(self, store) -> None:
        manager = ConversationSessionManager(
            store, FakeDialogueClient(fail_with=UpstreamError("model down"))
        )

        with pytest.raises(UpstreamError, match="model down"):
            await manager.start_conversation("en", "notes", "q")

        assert len(store) == 0
        assert store.delete_calls == 1

    @pytest.mark.asyncio
    async def test_update_failure_deletes_session(self, manager, store) -> None:
        store.fail_update = UpstreamError("store down")

        with pytest.raises(UpstreamError, match="store down"):
            await manager.start_conversation("en", "notes", "q")

        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_cleanup_failure_is_logged_and_original_error_surfaces(
        self, store, caplog
    ) -> None:
        store.fail_delete = UpstreamError("delete failed")
        manager = ConversationSessionManager(
            store, FakeDialogueClient(fail_with=UpstreamError("model down"))
        )

        with caplog.at_level(logging.ERROR), pytest.raises(UpstreamError, match="model down"):
            await manager.start_conversation("en", "notes", "q")

        assert any(r.getMessage() == "conversation_cleanup_failed" for r in caplog.records)
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_cancellation_after_create_deletes_session(self, store) -> None:
        manager = ConversationSessionManager(store, FakeDialogueClient(delay=5))
        task = asyncio.create_task(manager.start_conversation("en", "notes", "q"))
        await asyncio.sleep(0.01)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert len(store) == 0


class TestContinueConversation:
    """Continuação serializada por sessão."""

    @pytest.mark.asyncio
    async def test_continue_increments_turn(self, manager, store) -> None:
        started = await manager.start_conversation("en", "notes", "q1")

        exchange = await manager.continue_conversation(started.conversation_id, "q2")

        assert exchange.turn == 2
        assert exchange.answer == "reply:q2"
        remote = await store.fetch(started.conversation_id)
        assert remote.metadata["turn"] == "2"

    @pytest.mark.asyncio
    async def test_language_falls_back_to_session(self, manager, dialogue) -> None:
        started = await manager.start_conversation("fr", "notes", "q1")

        await manager.continue_conversation(started.conversation_id, "q2")
        await manager.continue_conversation(started.conversation_id, "q3", language="de")

        assert [turn.language for _, turn in dialogue.replies] == ["fr", "de"]

    @pytest.mark.asyncio
    async def test_language_falls_back_to_default(self, store, dialogue) -> None:
        manager = ConversationSessionManager(store, dialogue, default_language="zh-CN")
        remote = await store.create({"turn": "1"})

        await manager.continue_conversation(remote.conversation_id, "q")

        assert dialogue.replies[0][1].language == "zh-CN"

    @pytest.mark.asyncio
    async def test_unknown_conversation_is_not_found(self, manager) -> None:
        with pytest.raises(ConversationNotFoundError) as exc_info:
            await manager.continue_conversation("conv_missing", "q")
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_concurrent_continues_are_serialized(self, manager, store) -> None:
        started = await manager.start_conversation("en", "notes", "q0")
        conversation_id = started.conversation_id

        results = await asyncio.gather(
            manager.continue_conversation(conversation_id, "a"),
            manager.continue_conversation(conversation_id, "b"),
        )

        assert sorted(r.turn for r in results) == [2, 3]
        remote = await store.fetch(conversation_id)
        assert remote.turn == 3
        assert len(manager.locks) == 0

    @pytest.mark.asyncio
    async def test_failed_reply_keeps_session(self, store) -> None:
        dialogue = FakeDialogueClient()
        manager = ConversationSessionManager(store, dialogue)
        started = await manager.start_conversation("en", "notes", "q0")
        dialogue.fail_with = UpstreamError("model down")

        with pytest.raises(UpstreamError):
            await manager.continue_conversation(started.conversation_id, "q1")

        remote = await store.fetch(started.conversation_id)
        assert remote.turn == 1


class TestCloseConversation:
    """Encerramento e referências posteriores."""

    @pytest.mark.asyncio
    async def test_close_deletes_and_later_references_fail(self, manager, store) -> None:
        started = await manager.start_conversation("en", "notes", "q0")

        turn = await manager.close_conversation(started.conversation_id)

        assert turn == 1
        assert store.was_deleted(started.conversation_id)
        with pytest.raises(ConversationNotFoundError):
            await manager.continue_conversation(started.conversation_id, "again")
        with pytest.raises(ConversationNotFoundError):
            await manager.close_conversation(started.conversation_id)
        assert len(manager.locks) == 0
