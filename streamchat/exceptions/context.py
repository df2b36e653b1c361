"""
Context Exception Definitions for StreamChat

All context-related exceptions inherit from ChatBaseError.
"""

from typing import Any

from streamchat.exceptions.base import ChatBaseError


class ContextError(ChatBaseError):
    """Base exception for context management errors."""

    pass


class BudgetExceededError(ContextError):
    """Raised when the system prompt alone does not fit the token budget."""

    def __init__(self, message, system_tokens=None, max_tokens=None):
        super().__init__(
            message,
            details={"system_tokens": system_tokens, "max_tokens": max_tokens},
        )
        self.system_tokens = system_tokens
        self.max_tokens = max_tokens
        self.user_hint = (
            "The system prompt is larger than the context budget. "
            "Shorten SYSTEM_PROMPT or raise MAX_CONTEXT_TOKENS."
        )


class ContextValidationError(ContextError):
    """Raised when context validation fails."""

    def __init__(
        self, message: str, validation_type: str = None, invalid_value: Any = None
    ):
        super().__init__(message)
        self.validation_type = validation_type
        self.invalid_value = invalid_value
