#!/usr/bin/env python3
"""
Provider Exception Classes
==========================

Exceptions raised by the HTTP transport talking to the chat endpoint.
"""

from typing import Optional
from .base import ChatBaseError


class ProviderError(ChatBaseError):
    """
    Base exception for all provider-related errors.

    This is the parent class for all provider-specific exceptions
    and provides common functionality for provider error handling.
    """

    def __init__(
        self,
        message: str,
        provider_name: Optional[str] = None,
        model_name: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)

        if "provider_name" not in self.details and provider_name:
            self.details["provider_name"] = provider_name
        if "model_name" not in self.details and model_name:
            self.details["model_name"] = model_name


class ProviderAuthenticationError(ProviderError):
    """
    Raised when the endpoint rejects the API key (HTTP 401/403).
    """

    def __init__(self, message: str, **kwargs):
        super().__init__(message, **kwargs)
        self.user_hint = (
            "Authentication with the provider failed. "
            "Please check API_KEY in your environment or .env file."
        )


class ProviderRateLimitError(ProviderError):
    """
    Raised when provider rate limits are exceeded (HTTP 429).

    No retry is attempted; the hint tells the user how long to wait.
    """

    def __init__(self, message: str, retry_after: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)

        if retry_after is not None:
            self.details["retry_after_seconds"] = retry_after
        self.retry_after = retry_after

        if retry_after:
            self.user_hint = (
                f"Rate limit exceeded. Please wait {retry_after} seconds before trying again."
            )
        else:
            self.user_hint = (
                "Rate limit exceeded. Please wait before making additional requests."
            )


class ProviderConnectionError(ProviderError):
    """
    Raised when the endpoint cannot be reached at all.
    """

    def __init__(self, message: str, **kwargs):
        super().__init__(message, **kwargs)
        self.user_hint = (
            "Failed to connect to the provider. "
            "Please check API_URL_BASE and your network connection."
        )


class ProviderResponseError(ProviderError):
    """
    Raised when the endpoint answers with an unexpected status.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body_snippet: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)

        if status_code is not None:
            self.details["status_code"] = status_code
        if body_snippet:
            self.details["body_snippet"] = body_snippet
        self.status_code = status_code

        self.user_hint = (
            "The provider returned an error response. "
            "This may be a temporary issue or a wrong endpoint path in APIS."
        )
