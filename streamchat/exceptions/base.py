#!/usr/bin/env python3
"""
Base Exception Contract for StreamChat

Provides the single source of truth for the StreamChat error contract.
All domain-specific exceptions must inherit from ChatBaseError.
"""

from typing import Optional

DEFAULT_USER_HINT = "The chat request could not be completed. See the log for details."


class ChatBaseError(Exception):
    """
    The Base Contract for all StreamChat errors.
    """

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        user_hint: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.user_hint = user_hint or DEFAULT_USER_HINT
        self.details = details or {}
