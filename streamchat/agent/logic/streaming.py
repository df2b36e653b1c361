"""
Streaming Logic
===============
Incremental decoder for an SSE chat-completions response body.

One decoder lives for exactly one turn. It is fed raw lines in arrival
order and turns them into mode-tagged StreamSignals while accumulating the
answer text. Reasoning text is surfaced but never accumulated.

    IDLE/CONTENT --reasoning--> REASONING
    IDLE/REASONING --content--> CONTENT
    any --[DONE] or end of stream--> DONE
    any --read failure--> FAILED
"""

import logging
from dataclasses import dataclass, field
from typing import (
    AsyncIterable,
    Awaitable,
    Callable,
    Iterable,
    List,
    Optional,
)

from streamchat.agent.logic.parsers import (
    SSE_DATA_PREFIX,
    STREAM_DONE_SENTINEL,
    parse_stream_payload,
)
from streamchat.agent.structs import (
    DecoderMode,
    SignalType,
    StreamSignal,
    TurnOutcome,
)
from streamchat.exceptions import MalformedEventError, StreamReadError

logger = logging.getLogger(__name__)

DEFAULT_ASSISTANT_ROLE = "assistant"

_TERMINAL_MODES = (DecoderMode.DONE, DecoderMode.FAILED)


@dataclass
class DecoderState:
    """Mutable per-turn state. Discarded once the turn resolves."""

    mode: DecoderMode = DecoderMode.IDLE
    assistant_role: str = DEFAULT_ASSISTANT_ROLE
    content_parts: List[str] = field(default_factory=list)
    reasoning_emitted: bool = False
    # True while an answer block is open; reasoning closes it
    content_prefix_emitted: bool = False
    content_emitted: bool = False
    finish_reason: Optional[str] = None
    malformed_events: int = 0
    error: Optional[StreamReadError] = None

    @property
    def accumulated_content(self) -> str:
        return "".join(self.content_parts)


@dataclass
class DecodeResult:
    """Final view of a decoded stream."""

    content: str
    role: str
    mode: DecoderMode
    reasoning_emitted: bool
    content_emitted: bool
    finish_reason: Optional[str] = None
    malformed_events: int = 0
    error: Optional[StreamReadError] = None

    @property
    def failed(self) -> bool:
        return self.mode is DecoderMode.FAILED

    @property
    def produced_output(self) -> bool:
        """Whether anything visible was emitted during the turn."""
        return self.reasoning_emitted or self.content_emitted


class StreamDecoder:
    """SSE line decoder and output-mode state machine."""

    def __init__(self):
        self.state = DecoderState()

    @property
    def finished(self) -> bool:
        return self.state.mode in _TERMINAL_MODES

    def feed(self, line: str) -> List[StreamSignal]:
        """
        Decode one raw line.

        Args:
            line: A single SSE line, with or without its line ending

        Returns:
            List[StreamSignal]: Signals produced by this line, in order
        """
        if self.finished:
            return []

        line = line.rstrip("\r\n")
        if not line.startswith(SSE_DATA_PREFIX):
            return []

        payload = line[len(SSE_DATA_PREFIX):]
        if payload == STREAM_DONE_SENTINEL:
            self.state.mode = DecoderMode.DONE
            return []

        try:
            chunk = parse_stream_payload(payload)
        except MalformedEventError as e:
            self.state.malformed_events += 1
            logger.warning("Error parsing stream data: %s. Data: %r", e.message, payload)
            return []

        choice = chunk.first_choice
        if choice is None:
            return []
        if choice.finish_reason:
            self.state.finish_reason = choice.finish_reason
        if choice.delta is None:
            return []

        return self._apply_delta(
            choice.delta.role, choice.delta.reasoning_text, choice.delta.content
        )

    def _apply_delta(
        self, role: Optional[str], reasoning: str, content: Optional[str]
    ) -> List[StreamSignal]:
        state = self.state
        signals: List[StreamSignal] = []

        if role:
            state.assistant_role = role

        if reasoning:
            if state.mode is not DecoderMode.REASONING:
                if state.content_prefix_emitted:
                    signals.append(StreamSignal(SignalType.SEPARATOR))
                signals.append(StreamSignal(SignalType.REASONING_START))
                state.mode = DecoderMode.REASONING
                state.reasoning_emitted = True
                state.content_prefix_emitted = False
            signals.append(StreamSignal(SignalType.REASONING, reasoning))

        if content:
            if state.mode is DecoderMode.REASONING:
                signals.append(StreamSignal(SignalType.REASONING_END))
            state.mode = DecoderMode.CONTENT
            if not state.content_prefix_emitted:
                signals.append(StreamSignal(SignalType.CONTENT_START))
                state.content_prefix_emitted = True
            signals.append(StreamSignal(SignalType.CONTENT, content))
            state.content_parts.append(content)
            state.content_emitted = True

        return signals

    def finish(self) -> None:
        """Clean end of stream without a sentinel."""
        if not self.finished:
            self.state.mode = DecoderMode.DONE

    def fail(self, error: StreamReadError) -> None:
        """Transport read failure; terminal for this turn."""
        if self.finished:
            return
        logger.error("Error reading stream: %s", error.message)
        self.state.mode = DecoderMode.FAILED
        self.state.error = error

    async def consume(
        self,
        lines: AsyncIterable[str],
        on_signal: Optional[Callable[[StreamSignal], Awaitable[None]]] = None,
    ) -> DecodeResult:
        """
        Drive the decoder over an async line source until [DONE], end of
        stream, or a read failure. Lines after [DONE] are never pulled.
        """
        try:
            async for line in lines:
                for signal in self.feed(line):
                    if on_signal is not None:
                        await on_signal(signal)
                if self.finished:
                    break
        except StreamReadError as e:
            self.fail(e)
        finally:
            # Release the response when stopping early on [DONE]
            aclose = getattr(lines, "aclose", None)
            if aclose is not None:
                await aclose()

        self.finish()
        return self.result()

    def decode_lines(
        self,
        lines: Iterable[str],
        on_signal: Optional[Callable[[StreamSignal], None]] = None,
    ) -> DecodeResult:
        """Synchronous counterpart of ``consume`` for blocking line sources."""
        try:
            for line in lines:
                for signal in self.feed(line):
                    if on_signal is not None:
                        on_signal(signal)
                if self.finished:
                    break
        except StreamReadError as e:
            self.fail(e)

        self.finish()
        return self.result()

    def result(self) -> DecodeResult:
        state = self.state
        return DecodeResult(
            content=state.accumulated_content,
            role=state.assistant_role,
            mode=state.mode,
            reasoning_emitted=state.reasoning_emitted,
            content_emitted=state.content_emitted,
            finish_reason=state.finish_reason,
            malformed_events=state.malformed_events,
            error=state.error,
        )


def resolve_turn(result: DecodeResult) -> TurnOutcome:
    """
    Decide what a decoded turn means for the history.

    Only COMMITTED may be written to the store. A failed stream commits
    nothing, even if content was already shown to the user.
    """
    if result.failed:
        return TurnOutcome.FAILED
    if result.content:
        return TurnOutcome.COMMITTED
    if result.reasoning_emitted:
        return TurnOutcome.ADVISORY_ONLY
    return TurnOutcome.EMPTY
