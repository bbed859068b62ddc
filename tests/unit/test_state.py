"""
Unit Tests for Storage and Conversation State

Tests for MemoryStorage, BotState change tracking and property accessors.
"""

from types import SimpleNamespace

import pytest

import promptbot_core.state.storage as storage_module
from promptbot_core.builder import TurnContext
from promptbot_core.errors import StateStoreError
from promptbot_core.prompts import ConversationSlotState
from promptbot_core.state import ConversationState, MemoryStorage
from promptbot_core.testing import TestAdapter


class CountingStorage(MemoryStorage):
    """MemoryStorage that counts writes."""

    def __init__(self) -> None:
        super().__init__()
        self.writes = 0

    async def write(self, changes):
        self.writes += 1
        await super().write(changes)


class BrokenStorage(MemoryStorage):
    async def read(self, keys):
        raise ConnectionError("store offline")


# =============================================================================
# Memory Storage Tests
# =============================================================================


class TestMemoryStorage:
    """Tests for MemoryStorage."""

    @pytest.mark.asyncio
    async def test_read_missing_keys(self):
        """Test that unknown keys are omitted."""
        storage = MemoryStorage()
        assert await storage.read(["nope"]) == {}

    @pytest.mark.asyncio
    async def test_write_and_read(self):
        """Test basic write then read."""
        storage = MemoryStorage()
        await storage.write({"a": {"count": 1}, "b": {"count": 2}})

        items = await storage.read(["a", "b", "c"])

        assert items == {"a": {"count": 1}, "b": {"count": 2}}
        assert len(storage) == 2

    @pytest.mark.asyncio
    async def test_items_are_copied(self):
        """Test that callers never share state with the store."""
        storage = MemoryStorage()
        item = {"nested": {"in_prompt": False}}
        await storage.write({"key": item})

        item["nested"]["in_prompt"] = True
        first = await storage.read(["key"])
        first["key"]["nested"]["in_prompt"] = True
        second = await storage.read(["key"])

        assert second["key"]["nested"]["in_prompt"] is False

    @pytest.mark.asyncio
    async def test_delete(self):
        """Test deleting known and unknown keys."""
        storage = MemoryStorage()
        await storage.write({"key": {}})

        await storage.delete(["key", "unknown"])

        assert await storage.read(["key"]) == {}

    @pytest.mark.asyncio
    async def test_ttl_eviction(self, monkeypatch):
        """Test that entries expire after the TTL."""
        clock = [1000.0]
        monkeypatch.setattr(storage_module, "time", SimpleNamespace(time=lambda: clock[0]))

        storage = MemoryStorage(ttl_seconds=60)
        await storage.write({"key": {"v": 1}})

        clock[0] += 30
        assert await storage.read(["key"]) == {"key": {"v": 1}}

        clock[0] += 31
        assert await storage.read(["key"]) == {}
        assert len(storage) == 0

    @pytest.mark.asyncio
    async def test_write_sweeps_abandoned_entries(self, monkeypatch):
        """Test that expired keys nobody reads again are dropped on write."""
        clock = [1000.0]
        monkeypatch.setattr(storage_module, "time", SimpleNamespace(time=lambda: clock[0]))

        storage = MemoryStorage(ttl_seconds=1)
        for i in range(1000):
            await storage.write({f"webchat/conversations/c{i}": {"in_prompt": True}})
        assert len(storage) == 1000

        clock[0] += 2
        await storage.write({"webchat/conversations/new": {}})

        assert len(storage) == 1
        assert await storage.read(["webchat/conversations/new"]) == {"webchat/conversations/new": {}}

    @pytest.mark.asyncio
    async def test_cleanup_expired(self, monkeypatch):
        """Test the explicit sweep keeps fresh entries."""
        clock = [1000.0]
        monkeypatch.setattr(storage_module, "time", SimpleNamespace(time=lambda: clock[0]))

        storage = MemoryStorage(ttl_seconds=60)
        await storage.write({"old": {}})
        clock[0] += 50
        await storage.write({"fresh": {}})
        clock[0] += 20

        assert storage.cleanup_expired() == 1
        assert await storage.read(["old", "fresh"]) == {"fresh": {}}

    @pytest.mark.asyncio
    async def test_no_ttl_never_expires(self):
        """Test that storage without TTL keeps everything."""
        storage = MemoryStorage()
        await storage.write({"key": {}})

        assert storage.cleanup_expired() == 0
        assert len(storage) == 1


# =============================================================================
# Bot State Tests
# =============================================================================


class TestConversationState:
    """Tests for ConversationState."""

    @pytest.mark.asyncio
    async def test_storage_key(self, adapter, conversation_state):
        """Test the channel/conversation storage key."""
        context = TurnContext(adapter, adapter.make_activity("hi"))

        assert conversation_state.get_storage_key(context) == f"test/conversations/{adapter.conversation.id}"

    @pytest.mark.asyncio
    async def test_storage_key_requires_conversation(self, adapter, conversation_state):
        """Test that activities without a conversation are rejected."""
        activity = adapter.make_activity("hi")
        activity.conversation = None

        with pytest.raises(ValueError):
            conversation_state.get_storage_key(TurnContext(adapter, activity))

    @pytest.mark.asyncio
    async def test_get_before_load(self, adapter, conversation_state):
        """Test that raw state requires loading first."""
        with pytest.raises(RuntimeError):
            conversation_state.get(TurnContext(adapter, adapter.make_activity("hi")))

    @pytest.mark.asyncio
    async def test_unchanged_state_not_written(self):
        """Test that save only writes when the state changed."""
        storage = CountingStorage()
        conversation_state = ConversationState(storage)
        adapter = TestAdapter().use(conversation_state)
        slot = conversation_state.create_property("slot_state", ConversationSlotState)

        async def read_only(context: TurnContext) -> None:
            await slot.get(context)

        async def set_flag(context: TurnContext) -> None:
            state = await slot.get(context, ConversationSlotState)
            state.in_prompt = True

        await adapter.send_text_to_bot("one", read_only)
        assert storage.writes == 0

        await adapter.send_text_to_bot("two", set_flag)
        assert storage.writes == 1

        await adapter.send_text_to_bot("three", set_flag)
        assert storage.writes == 1

    @pytest.mark.asyncio
    async def test_model_property_round_trip(self, adapter, conversation_state):
        """Test that pydantic properties are re-validated on a later turn."""
        slot = conversation_state.create_property("slot_state", ConversationSlotState)
        seen = []

        async def logic(context: TurnContext) -> None:
            state = await slot.get(context, ConversationSlotState)
            seen.append(state)
            state.in_prompt = True

        await adapter.send_text_to_bot("one", logic)
        await adapter.send_text_to_bot("two", logic)

        assert isinstance(seen[1], ConversationSlotState)
        assert seen[0].in_prompt is True
        assert seen[1].in_prompt is True

    @pytest.mark.asyncio
    async def test_property_without_default(self, adapter, conversation_state):
        """Test that a missing property without default factory is None."""
        values = []
        name = conversation_state.create_property("name")

        async def logic(context: TurnContext) -> None:
            values.append(await name.get(context))
            await name.set(context, "Ada")

        await adapter.send_text_to_bot("one", logic)
        await adapter.send_text_to_bot("two", logic)

        assert values == [None, "Ada"]

    @pytest.mark.asyncio
    async def test_property_delete(self, adapter, conversation_state, storage):
        """Test deleting a property."""
        name = conversation_state.create_property("name")

        async def set_name(context: TurnContext) -> None:
            await name.set(context, "Ada")

        async def delete_name(context: TurnContext) -> None:
            await name.delete(context)

        await adapter.send_text_to_bot("one", set_name)
        await adapter.send_text_to_bot("two", delete_name)

        key = f"test/conversations/{adapter.conversation.id}"
        assert (await storage.read([key]))[key] == {}

    @pytest.mark.asyncio
    async def test_clear(self, adapter, conversation_state, storage):
        """Test that clear empties the persisted state."""
        name = conversation_state.create_property("name")

        async def set_name(context: TurnContext) -> None:
            await name.set(context, "Ada")

        async def clear(context: TurnContext) -> None:
            await conversation_state.clear(context)

        await adapter.send_text_to_bot("one", set_name)
        await adapter.send_text_to_bot("two", clear)

        key = f"test/conversations/{adapter.conversation.id}"
        assert (await storage.read([key]))[key] == {}

    @pytest.mark.asyncio
    async def test_delete(self, adapter, conversation_state, storage):
        """Test that delete removes the state from storage."""
        name = conversation_state.create_property("name")

        async def set_name(context: TurnContext) -> None:
            await name.set(context, "Ada")

        await adapter.send_text_to_bot("one", set_name)
        context = TurnContext(adapter, adapter.make_activity("two"))
        await conversation_state.delete(context)

        assert len(storage) == 0

    @pytest.mark.asyncio
    async def test_failed_turn_not_saved(self, adapter, conversation_state, storage):
        """Test that a handler error prevents the save."""
        name = conversation_state.create_property("name")

        async def logic(context: TurnContext) -> None:
            await name.set(context, "Ada")
            raise RuntimeError("handler failed")

        with pytest.raises(RuntimeError):
            await adapter.send_text_to_bot("one", logic)

        assert len(storage) == 0

    @pytest.mark.asyncio
    async def test_read_failure_wrapped(self):
        """Test that storage errors surface as StateStoreError."""
        conversation_state = ConversationState(BrokenStorage())
        adapter = TestAdapter().use(conversation_state)

        async def logic(context: TurnContext) -> None:
            pass

        with pytest.raises(StateStoreError):
            await adapter.send_text_to_bot("hi", logic)

    def test_property_name_required(self, conversation_state):
        """Test that properties need a name."""
        with pytest.raises(ValueError):
            conversation_state.create_property("")

    def test_storage_required(self):
        """Test that state needs a storage backend."""
        with pytest.raises(TypeError):
            ConversationState(None)
