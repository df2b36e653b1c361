"""
SSE Event Parsing
=================
Typed view of one OpenAI-compatible streaming chunk.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from streamchat.exceptions import MalformedEventError

SSE_DATA_PREFIX = "data: "
STREAM_DONE_SENTINEL = "[DONE]"


class Delta(BaseModel):
    """Incremental change to the in-progress assistant message."""

    model_config = ConfigDict(extra="ignore")

    role: Optional[str] = None
    content: Optional[str] = None
    # DeepSeek-style name first, OpenRouter-style name as fallback
    reasoning_content: Optional[str] = None
    reasoning: Optional[str] = None

    @property
    def reasoning_text(self) -> str:
        return self.reasoning_content or self.reasoning or ""


class StreamChoice(BaseModel):
    model_config = ConfigDict(extra="ignore")

    delta: Optional[Delta] = None
    finish_reason: Optional[str] = None


class StreamChunk(BaseModel):
    model_config = ConfigDict(extra="ignore")

    choices: Optional[List[StreamChoice]] = None

    @property
    def first_choice(self) -> Optional[StreamChoice]:
        return self.choices[0] if self.choices else None


def parse_stream_payload(payload: str) -> StreamChunk:
    """
    Parse the JSON text after the ``data: `` marker.

    Raises:
        MalformedEventError: For invalid JSON or an unexpected shape
    """
    try:
        return StreamChunk.model_validate_json(payload)
    except ValidationError as e:
        raise MalformedEventError(
            f"Could not parse stream event: {e.error_count()} error(s)",
            raw_payload=payload,
            original_error=e,
        ) from e
