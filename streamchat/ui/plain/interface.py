"""
ui/plain/interface.py
"""

import asyncio
from typing import Any, Dict, Optional

from streamchat.protocol import EventBus, EventTypes
from .renderer import PlainRenderer
from .input import InputManager


class PlainUI:
    """
    Controller for the plain terminal: turns bus events into renderer calls.
    Only passive output is event-driven; input is read by direct call.
    """

    def __init__(
        self,
        event_bus: EventBus,
        renderer: Optional[PlainRenderer] = None,
        input_manager: Optional[InputManager] = None,
    ):
        self.renderer = renderer or PlainRenderer()
        self.input = input_manager or InputManager()
        self._event_bus = event_bus
        self._terminal_lock = asyncio.Lock()

    async def start(self):
        """Subscribe to output events."""
        subscriptions = {
            EventTypes.THINKING_STARTED: self._on_thinking_started,
            EventTypes.THINKING_STOPPED: self._on_thinking_stopped,
            EventTypes.RESPONSE_STARTED: self._on_response_started,
            EventTypes.STREAM_CHUNK: self._on_stream_chunk,
            EventTypes.BLOCK_SEPARATOR: self._on_block_separator,
            EventTypes.RESPONSE_COMPLETE: self._on_response_complete,
            EventTypes.COMMAND_RESULT: self._on_command_result,
            EventTypes.CONTEXT_OVERFLOW: self._on_context_overflow,
            EventTypes.INFO: self._on_info,
            EventTypes.WARNING: self._on_warning,
            EventTypes.ERROR: self._on_error,
        }
        for event_type, handler in subscriptions.items():
            await self._event_bus.subscribe(event_type, handler)

    async def read_input(self) -> Optional[str]:
        return await self.input.read_input()

    def show_banner(self, model: str, provider: str):
        self.renderer.print_startup_banner(model, provider)

    # --- EVENT HANDLERS (Passive Output) ---

    async def _on_thinking_started(self, data: Dict[str, Any]):
        async with self._terminal_lock:
            self.renderer.start_reasoning()

    async def _on_thinking_stopped(self, data: Dict[str, Any]):
        async with self._terminal_lock:
            self.renderer.stop_reasoning()

    async def _on_response_started(self, data: Dict[str, Any]):
        async with self._terminal_lock:
            self.renderer.start_content()

    async def _on_stream_chunk(self, data: Dict[str, Any]):
        async with self._terminal_lock:
            thinking_chunk = data.get("thinking")
            answer_chunk = data.get("chunk")
            if thinking_chunk:
                self.renderer.print_stream(thinking_chunk, is_thinking=True)
            if answer_chunk:
                self.renderer.print_stream(answer_chunk)

    async def _on_block_separator(self, data: Dict[str, Any]):
        async with self._terminal_lock:
            self.renderer.print_separator()

    async def _on_response_complete(self, data: Dict[str, Any]):
        async with self._terminal_lock:
            self.renderer.finish_response()

    async def _on_command_result(self, data: Dict[str, Any]):
        async with self._terminal_lock:
            message = data.get("message", "")
            if not message:
                return
            if data.get("success", True):
                self.renderer.print_reply(message)
            else:
                self.renderer.print_error(message)

    async def _on_context_overflow(self, data: Dict[str, Any]):
        async with self._terminal_lock:
            self.renderer.print_warning(
                f"Context: {data.get('current_tokens')}/{data.get('max_tokens')} tokens"
            )

    async def _on_info(self, data: Dict[str, Any]):
        async with self._terminal_lock:
            msg = data.get("message", "")
            if msg.strip():
                self.renderer.print_system(msg)

    async def _on_warning(self, data: Dict[str, Any]):
        async with self._terminal_lock:
            self.renderer.print_warning(data.get("message", "Unknown warning"))

    async def _on_error(self, data: Dict[str, Any]):
        async with self._terminal_lock:
            self.renderer.print_error(
                data.get("message", "Unknown error"), data.get("hint")
            )
