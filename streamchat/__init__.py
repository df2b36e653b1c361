"""StreamChat: streaming terminal client for OpenAI-compatible chat endpoints."""

__version__ = "0.1.0"
