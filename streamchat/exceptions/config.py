#!/usr/bin/env python3
"""
Configuration Exception Definitions for StreamChat

All configuration-related exceptions inherit from ChatBaseError.
"""

from streamchat.exceptions.base import ChatBaseError


class ConfigError(ChatBaseError):
    """Raised when settings are missing or invalid at startup."""

    def __init__(self, message, field_name=None, invalid_value=None):
        super().__init__(message)
        self.field_name = field_name
        self.invalid_value = invalid_value
        self.user_hint = (
            "Configuration is incomplete. Set API_KEY, API_URL_BASE, APIS and MODEL "
            "in the environment or a .env file."
        )
