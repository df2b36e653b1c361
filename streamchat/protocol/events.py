from enum import Enum


class EventTypes(str, Enum):
    """
    Canonical Event Names.
    Using an Enum prevents typo bugs (e.g., 'user_input' vs 'user_input_submitted').
    """

    # 1. System Events
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    # 2. Conversation Events (Downstream)
    THINKING_STARTED = "thinking_started"
    THINKING_STOPPED = "thinking_stopped"
    RESPONSE_STARTED = "response_started"
    STREAM_CHUNK = "stream_chunk"
    BLOCK_SEPARATOR = "block_separator"
    RESPONSE_COMPLETE = "response_complete"

    # 3. Input Events (Upstream: UI -> Agent)
    USER_INPUT_SUBMITTED = "user_input_submitted"

    # 4. Command Events
    COMMAND_RESULT = "command_result"

    # 5. Context Events
    CONTEXT_OVERFLOW = "context_overflow"
