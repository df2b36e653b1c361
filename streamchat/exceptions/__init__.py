#!/usr/bin/env python3
"""
StreamChat Exceptions Package

Unified exception hierarchy for the StreamChat client.
"""

# Base exceptions
from .base import ChatBaseError

# Config exceptions
from .config import ConfigError

# Context exceptions
from .context import (
    BudgetExceededError,
    ContextError,
    ContextValidationError,
)

# Stream exceptions
from .stream import (
    MalformedEventError,
    StreamError,
    StreamReadError,
)

# Provider exceptions
from .provider import (
    ProviderError,
    ProviderAuthenticationError,
    ProviderRateLimitError,
    ProviderConnectionError,
    ProviderResponseError,
)


__all__ = [
    # Base
    "ChatBaseError",
    # Config
    "ConfigError",
    # Context
    "ContextError",
    "BudgetExceededError",
    "ContextValidationError",
    # Stream
    "StreamError",
    "MalformedEventError",
    "StreamReadError",
    # Provider
    "ProviderError",
    "ProviderAuthenticationError",
    "ProviderRateLimitError",
    "ProviderConnectionError",
    "ProviderResponseError",
]
