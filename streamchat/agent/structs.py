import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import SecretStr

# --- 0. Conversation ---


@dataclass(frozen=True)
class Message:
    """Atomic conversation unit. Immutable once created."""

    role: str  # "system", "user", "assistant" or whatever the endpoint resolved
    content: str
    # Advisory wall-clock time, never sent to the endpoint
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, str]:
        """Request shape: role and content only."""
        return {"role": self.role, "content": self.content}


# --- 1. Provider ---


@dataclass(frozen=True)
class ProviderDescriptor:
    """
    Everything the transport needs to reach one OpenAI-compatible endpoint.
    The core passes it through without interpreting it.
    """

    provider: str
    url_base: str
    api_key: SecretStr
    apis: Dict[str, str]
    model: str

    def endpoint(self, name: str) -> Optional[str]:
        """Full URL for a named path in the API table, or None."""
        path = self.apis.get(name)
        if path is None:
            return None
        return self.url_base + path


# --- 2. Stream Signals (Decoder -> Orchestrator) ---


class SignalType(str, Enum):
    SEPARATOR = "separator"
    REASONING_START = "reasoning_start"
    REASONING = "reasoning"
    REASONING_END = "reasoning_end"
    CONTENT_START = "content_start"
    CONTENT = "content"


@dataclass
class StreamSignal:
    """
    A mode-tagged output of the stream decoder.
    REASONING and CONTENT carry text; the others carry no data.
    """

    type: SignalType
    data: str = ""


class DecoderMode(str, Enum):
    IDLE = "idle"
    REASONING = "reasoning"
    CONTENT = "content"
    DONE = "done"
    FAILED = "failed"


# --- 3. Turn Results ---


class TurnOutcome(str, Enum):
    COMMITTED = "committed"  # assistant message stored
    ADVISORY_ONLY = "advisory_only"  # reasoning only, nothing stored
    EMPTY = "empty"  # nothing at all, nothing stored
    FAILED = "failed"  # transport read failure, nothing stored


@dataclass
class TurnResult:
    """Outcome of one user turn, as seen by the command loop."""

    outcome: TurnOutcome
    content: str = ""
    role: str = "assistant"
    finish_reason: Optional[str] = None
    malformed_events: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)
