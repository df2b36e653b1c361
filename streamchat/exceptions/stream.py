#!/usr/bin/env python3
"""
Stream Exception Definitions for StreamChat

Errors raised while decoding a Server-Sent-Events response body.
"""

from streamchat.exceptions.base import ChatBaseError


class StreamError(ChatBaseError):
    """Base exception for streaming response errors."""

    pass


class MalformedEventError(StreamError):
    """A single SSE payload could not be parsed. Recorded, never fatal."""

    def __init__(self, message, raw_payload=None, original_error=None):
        super().__init__(message, original_error=original_error)
        self.raw_payload = raw_payload
        self.user_hint = "The model sent a chunk that could not be read."


class StreamReadError(StreamError):
    """The line source failed mid-stream. Fatal for the turn."""

    def __init__(self, message, original_error=None, details=None):
        super().__init__(message, original_error=original_error, details=details)
        self.user_hint = (
            "The response stream was interrupted. "
            "Nothing from this reply was saved to the conversation."
        )
