"""
Chat Service
============
Runs one user turn end to end: history, context, transport, decoder, commit.
Strictly Event-Driven. No UI coupling.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from streamchat.agent.context import ContextManager
from streamchat.agent.logic.streaming import StreamDecoder, resolve_turn
from streamchat.agent.structs import SignalType, StreamSignal, TurnOutcome, TurnResult
from streamchat.exceptions import BudgetExceededError
from streamchat.protocol import EventBus, EventTypes
from streamchat.providers.base import BaseProvider

NO_CONTENT_NOTICE = "Received no response content."

# Payload-less signals map one to one onto bus events
_MARKER_EVENTS = {
    SignalType.SEPARATOR: EventTypes.BLOCK_SEPARATOR,
    SignalType.REASONING_START: EventTypes.THINKING_STARTED,
    SignalType.REASONING_END: EventTypes.THINKING_STOPPED,
    SignalType.CONTENT_START: EventTypes.RESPONSE_STARTED,
}


class ChatService:
    """
    Turn orchestrator.

    Owns no state of its own beyond its collaborators: the history lives in
    the ContextManager and per-turn decode state in a fresh StreamDecoder.
    """

    def __init__(
        self,
        context_manager: ContextManager,
        provider: BaseProvider,
        event_bus: Optional[EventBus] = None,
    ):
        self.context_manager = context_manager
        self.provider = provider
        self.event_bus = event_bus or EventBus()
        self.logger = logging.getLogger(__name__)
        self._turn_lock = asyncio.Lock()

    async def run_turn(self, text: str) -> TurnResult:
        """
        Send one user message and stream the reply.

        Raises:
            BudgetExceededError: If the system prompt alone exceeds the budget
            StreamReadError: If the response body could not be read to the end
            ProviderError: If the request itself failed
        """
        async with self._turn_lock:
            await self.event_bus.emit(EventTypes.USER_INPUT_SUBMITTED, {"text": text})
            user_message = self.context_manager.add_user_message(text)

            try:
                context = self.context_manager.get_context()
            except BudgetExceededError as e:
                await self.event_bus.emit(
                    EventTypes.CONTEXT_OVERFLOW,
                    {
                        "message": e.message,
                        "current_tokens": e.details.get("system_tokens"),
                        "max_tokens": e.details.get("max_tokens"),
                    },
                )
                raise

            if not context or context[-1] is not user_message:
                await self.event_bus.emit(
                    EventTypes.WARNING,
                    {
                        "message": "Message does not fit the "
                        f"{self.context_manager.max_tokens} token budget and was not sent.",
                        "context": "context_budget",
                    },
                )

            self.logger.debug("Sending %d message(s)", len(context))
            decoder = StreamDecoder()
            try:
                result = await decoder.consume(
                    self.provider.stream_chat(context), self._forward_signal
                )
            finally:
                # Always unlock the UI, even when the request failed
                await self.event_bus.emit(
                    EventTypes.RESPONSE_COMPLETE,
                    {"rendered": decoder.result().produced_output},
                )

            outcome = resolve_turn(result)
            metadata: Dict[str, Any] = {
                "context_messages": len(context),
                "reasoning_emitted": result.reasoning_emitted,
            }
            turn = TurnResult(
                outcome=outcome,
                content=result.content,
                role=result.role,
                finish_reason=result.finish_reason,
                malformed_events=result.malformed_events,
                metadata=metadata,
            )

            if outcome is TurnOutcome.FAILED:
                raise result.error

            # ADVISORY_ONLY already showed its reasoning and stores nothing
            if outcome is TurnOutcome.COMMITTED:
                self.context_manager.add_assistant_message(result.content, role=result.role)
            elif outcome is TurnOutcome.EMPTY:
                await self.event_bus.emit(
                    EventTypes.INFO, {"message": NO_CONTENT_NOTICE, "context": "turn"}
                )

            if result.malformed_events:
                self.logger.warning(
                    "Turn finished with %d malformed event(s) skipped",
                    result.malformed_events,
                )
            return turn

    async def _forward_signal(self, signal: StreamSignal) -> None:
        if signal.type is SignalType.REASONING:
            await self.event_bus.emit(EventTypes.STREAM_CHUNK, {"thinking": signal.data})
        elif signal.type is SignalType.CONTENT:
            await self.event_bus.emit(EventTypes.STREAM_CHUNK, {"chunk": signal.data})
        else:
            await self.event_bus.emit(_MARKER_EVENTS[signal.type], {})
