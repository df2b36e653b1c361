import logging
from typing import Any, Dict, List

from streamchat.protocol.bus import EventBus
from streamchat.protocol.events import EventTypes


class EventLogger:
    """
    Bus-driven session logger.

    - Aggregates stream chunks to avoid noise: one record per response.
    - Writes through the root handlers configured by ``setup_logging``.
    """

    def __init__(self, bus: EventBus):
        self._bus = bus
        self._buffer: List[str] = []  # The "Stream Aggregator" buffer
        self._thinking_chars = 0
        self._logger = logging.getLogger("StreamChat")

    async def start(self):
        """Subscribe to the bus."""
        # Operational Events
        await self._bus.subscribe(EventTypes.INFO, self._log_info)
        await self._bus.subscribe(EventTypes.WARNING, self._log_warning)
        await self._bus.subscribe(EventTypes.ERROR, self._log_error)

        # The "Stream Aggregator" Pattern
        await self._bus.subscribe(EventTypes.STREAM_CHUNK, self._handle_chunk)
        await self._bus.subscribe(
            EventTypes.RESPONSE_COMPLETE, self._handle_response_end
        )

        await self._bus.subscribe(EventTypes.CONTEXT_OVERFLOW, self._log_context_event)
        await self._bus.subscribe(EventTypes.USER_INPUT_SUBMITTED, self._log_user_input)

    # --- Handlers ---

    async def _log_info(self, data: Dict[str, Any]):
        msg = data.get("message", str(data))
        self._logger.info(f"ℹ️  {msg}")

    async def _log_warning(self, data: Dict[str, Any]):
        msg = data.get("message", str(data))
        self._logger.warning(f"⚠️  {msg}")

    async def _log_error(self, data: Dict[str, Any]):
        msg = data.get("message", str(data))
        self._logger.error(f"🚨 ERROR: {msg}")

    async def _log_user_input(self, data: Dict[str, Any]):
        text = data.get("text", "")
        self._logger.info(f"👤 USER: {len(text)} chars")

    async def _log_context_event(self, data: Dict[str, Any]):
        self._logger.warning(f"🧠 CONTEXT: {data.get('message', data)}")

    # --- The Aggregator Logic ---

    async def _handle_chunk(self, data: Dict[str, Any]):
        """Silent buffer. Doesn't print."""
        chunk = data.get("chunk", "")
        if chunk:
            self._buffer.append(chunk)
        thinking = data.get("thinking", "")
        if thinking:
            self._thinking_chars += len(thinking)

    async def _handle_response_end(self, data: Dict[str, Any]):
        """Flushes the buffer to the log."""
        full_text = "".join(self._buffer)
        self._logger.info(
            f"🤖 MODEL: {len(full_text)} content chars, "
            f"{self._thinking_chars} reasoning chars"
        )
        self._logger.debug(f"🤖 MODEL TEXT: {full_text}")
        self._buffer.clear()
        self._thinking_chars = 0
