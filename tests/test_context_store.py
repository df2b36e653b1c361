# Test suite for the conversation history store and manager

import pytest

from streamchat.agent.context import ContextManager, ContextStore, Message
from streamchat.exceptions import BudgetExceededError, ContextValidationError


class TestContextStore:
    """History store: append-only, snapshot isolation, system prompt handling"""

    @pytest.fixture
    def store(self):
        return ContextStore("be concise")

    def test_append_preserves_order_and_count(self, store):
        for i in range(25):
            store.append("user" if i % 2 == 0 else "assistant", f"message {i}")

        snapshot = store.snapshot()
        assert len(snapshot) == 25
        assert len(store) == 25
        assert [m.content for m in snapshot] == [f"message {i}" for i in range(25)]

    def test_append_returns_timestamped_message(self, store):
        message = store.append("user", "hi")
        assert isinstance(message, Message)
        assert message.role == "user"
        assert message.content == "hi"
        assert message.timestamp > 0

    def test_snapshot_is_independent_copy(self, store):
        store.append("user", "first")
        snapshot = store.snapshot()
        snapshot.append(Message(role="user", content="injected"))
        snapshot.clear()

        assert [m.content for m in store.snapshot()] == ["first"]

    def test_system_prompt_not_in_history(self, store):
        store.append("user", "hi")
        assert store.system_prompt().role == "system"
        assert store.system_prompt().content == "be concise"
        assert all(m.role != "system" for m in store.snapshot())

    @pytest.mark.parametrize("text", ["", "   ", "\n\t "])
    def test_blank_system_prompt_is_none(self, text):
        assert ContextStore(text).system_prompt() is None

    def test_message_to_dict_excludes_timestamp(self):
        message = Message(role="user", content="hello")
        assert message.to_dict() == {"role": "user", "content": "hello"}


class TestContextManager:
    """Store + strategy wiring"""

    def test_rejects_non_positive_budget(self):
        with pytest.raises(ContextValidationError):
            ContextManager(max_tokens=0)

    def test_context_includes_system_prompt_first(self):
        manager = ContextManager("be concise", max_tokens=100)
        manager.add_user_message("hi")
        manager.add_assistant_message("hello")

        context = manager.get_context()
        assert [m.role for m in context] == ["system", "user", "assistant"]

    def test_assistant_message_keeps_resolved_role(self):
        manager = ContextManager(max_tokens=100)
        manager.add_assistant_message("hello", role="model")
        assert manager.get_history()[-1].role == "model"

    def test_get_context_raises_when_system_prompt_too_large(self):
        manager = ContextManager("x" * 400, max_tokens=20)
        manager.add_user_message("hi")
        with pytest.raises(BudgetExceededError):
            manager.get_context()

    def test_stats_report_sizes(self):
        manager = ContextManager("be concise", max_tokens=100)
        manager.add_user_message("hi")

        stats = manager.get_stats()
        assert stats["conversation_length"] == 1
        assert stats["context_messages"] == 2
        # "be concise" -> 5 + 10 // 4 = 7, "hi" -> 5
        assert stats["estimated_tokens"] == 12
        assert stats["token_limit"] == 100

    def test_stats_with_oversized_system_prompt(self):
        manager = ContextManager("x" * 400, max_tokens=20)
        stats = manager.get_stats()
        assert stats["context_messages"] == 0
        assert stats["estimated_tokens"] == 0
