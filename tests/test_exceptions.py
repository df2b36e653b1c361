"""Tests for the user hints carried by the error hierarchy."""

from streamchat.exceptions import ChatBaseError, ProviderError, StreamReadError
from streamchat.exceptions.base import DEFAULT_USER_HINT


class TestUserHints:
    def test_default_hint_names_the_chat_request(self):
        error = ChatBaseError("something broke")

        assert error.user_hint == DEFAULT_USER_HINT
        assert "chat request" in error.user_hint

    def test_explicit_hint_wins(self):
        error = ProviderError("boom", user_hint="Try another model.")

        assert error.user_hint == "Try another model."

    def test_stream_read_error_has_its_own_hint(self):
        error = StreamReadError("Error reading stream: reset")

        assert error.user_hint != DEFAULT_USER_HINT
        assert "Nothing from this reply was saved" in error.user_hint
