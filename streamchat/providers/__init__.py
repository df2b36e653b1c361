"""
Provider Package
================

HTTP transports that turn a context into a stream of SSE lines.
"""
from .base import BaseProvider
from .openai_compat import OpenAICompatibleProvider, iter_sse_lines

__all__ = [
    "BaseProvider",
    "OpenAICompatibleProvider",
    "iter_sse_lines",
]
