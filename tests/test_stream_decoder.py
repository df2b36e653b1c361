"""Tests for the SSE stream decoder and turn resolution."""

import json
from typing import List, Optional

import pytest

from streamchat.agent.logic.parsers import parse_stream_payload
from streamchat.agent.logic.streaming import StreamDecoder, resolve_turn
from streamchat.agent.structs import DecoderMode, SignalType, TurnOutcome
from streamchat.exceptions import MalformedEventError, StreamReadError


def data_line(
    content: Optional[str] = None,
    reasoning: Optional[str] = None,
    role: Optional[str] = None,
    reasoning_key: str = "reasoning_content",
    finish_reason: Optional[str] = None,
) -> str:
    delta = {}
    if role is not None:
        delta["role"] = role
    if content is not None:
        delta["content"] = content
    if reasoning is not None:
        delta[reasoning_key] = reasoning
    choice = {"delta": delta}
    if finish_reason is not None:
        choice["finish_reason"] = finish_reason
    return "data: " + json.dumps({"choices": [choice]})


DONE = "data: [DONE]"


async def async_lines(lines: List[str], fail_after: Optional[int] = None):
    for i, line in enumerate(lines):
        if fail_after is not None and i == fail_after:
            raise StreamReadError("Error reading stream: connection reset")
        yield line


class TestParser:
    def test_parses_content_delta(self):
        chunk = parse_stream_payload('{"choices":[{"delta":{"content":"Hel"}}]}')
        assert chunk.first_choice.delta.content == "Hel"

    def test_reasoning_field_fallback(self):
        chunk = parse_stream_payload('{"choices":[{"delta":{"reasoning":"hmm"}}]}')
        assert chunk.first_choice.delta.reasoning_text == "hmm"

    def test_invalid_json_is_malformed(self):
        with pytest.raises(MalformedEventError) as exc_info:
            parse_stream_payload("{not json")
        assert exc_info.value.raw_payload == "{not json"

    def test_wrong_shape_is_malformed(self):
        with pytest.raises(MalformedEventError):
            parse_stream_payload('{"choices": "nope"}')

    def test_extra_fields_ignored(self):
        chunk = parse_stream_payload(
            '{"id":"x","object":"chunk","choices":[{"index":0,"delta":{"content":"a"}}]}'
        )
        assert chunk.first_choice.delta.content == "a"


class TestStreamDecoder:
    @pytest.fixture
    def decoder(self):
        return StreamDecoder()

    def test_hello_example(self, decoder):
        result = decoder.decode_lines(
            [
                'data: {"choices":[{"delta":{"content":"Hel"}}]}',
                'data: {"choices":[{"delta":{"content":"lo"}}]}',
                DONE,
            ]
        )
        assert result.content == "Hello"
        assert result.role == "assistant"
        assert result.mode is DecoderMode.DONE

    def test_reasoning_excluded_from_content(self, decoder):
        result = decoder.decode_lines(
            [
                data_line(reasoning="think 1 "),
                data_line(content="A"),
                data_line(reasoning="think 2 "),
                data_line(content="B"),
                data_line(reasoning="think 3", content="C"),
                DONE,
            ]
        )
        assert result.content == "ABC"
        assert result.reasoning_emitted is True

    def test_lines_after_done_ignored(self, decoder):
        result = decoder.decode_lines(
            [data_line(content="kept"), DONE, data_line(content="IGNORED")]
        )
        assert result.content == "kept"
        assert "IGNORED" not in result.content

    def test_feed_after_done_returns_nothing(self, decoder):
        decoder.feed(DONE)
        assert decoder.feed(data_line(content="late")) == []
        assert decoder.state.accumulated_content == ""

    def test_malformed_line_does_not_interrupt(self, decoder):
        result = decoder.decode_lines(
            [data_line(content="foo"), "data: {broken", data_line(content="bar"), DONE]
        )
        assert result.content == "foobar"
        assert result.malformed_events == 1
        assert not result.failed

    def test_non_data_lines_ignored(self, decoder):
        result = decoder.decode_lines(
            ["", ": keep-alive", "event: message", "data:no-space", data_line(content="x")]
        )
        assert result.content == "x"
        assert result.malformed_events == 0

    def test_crlf_line_endings(self, decoder):
        result = decoder.decode_lines([data_line(content="x") + "\r\n", DONE + "\r\n"])
        assert result.content == "x"
        assert result.mode is DecoderMode.DONE

    def test_role_adopted_and_overwritten(self, decoder):
        result = decoder.decode_lines(
            [
                data_line(role="assistant", content=""),
                data_line(role="model", content="a"),
                data_line(role="", content="b"),
            ]
        )
        assert result.role == "model"
        assert result.content == "ab"

    def test_empty_choices_ignored(self, decoder):
        result = decoder.decode_lines(['data: {"choices":[]}', data_line(content="x")])
        assert result.content == "x"
        assert result.malformed_events == 0

    def test_finish_reason_recorded(self, decoder):
        result = decoder.decode_lines(
            [data_line(content="x"), data_line(content="", finish_reason="stop"), DONE]
        )
        assert result.finish_reason == "stop"

    def test_end_of_stream_without_sentinel_is_done(self, decoder):
        result = decoder.decode_lines([data_line(content="x")])
        assert result.mode is DecoderMode.DONE

    def test_signal_sequence_reasoning_then_content(self, decoder):
        signals = []
        decoder.decode_lines(
            [
                data_line(reasoning="r1"),
                data_line(reasoning="r2"),
                data_line(content="c1"),
                data_line(content="c2"),
            ],
            on_signal=signals.append,
        )
        assert [(s.type, s.data) for s in signals] == [
            (SignalType.REASONING_START, ""),
            (SignalType.REASONING, "r1"),
            (SignalType.REASONING, "r2"),
            (SignalType.REASONING_END, ""),
            (SignalType.CONTENT_START, ""),
            (SignalType.CONTENT, "c1"),
            (SignalType.CONTENT, "c2"),
        ]

    def test_signal_sequence_content_interrupted_by_reasoning(self, decoder):
        signals = []
        decoder.decode_lines(
            [
                data_line(content="c1"),
                data_line(reasoning="r1", reasoning_key="reasoning"),
                data_line(content="c2"),
            ],
            on_signal=signals.append,
        )
        assert [s.type for s in signals] == [
            SignalType.CONTENT_START,
            SignalType.CONTENT,
            SignalType.SEPARATOR,
            SignalType.REASONING_START,
            SignalType.REASONING,
            SignalType.REASONING_END,
            SignalType.CONTENT_START,
            SignalType.CONTENT,
        ]

    @pytest.mark.asyncio
    async def test_consume_async_source(self, decoder):
        signals = []

        async def collect(signal):
            signals.append(signal)

        result = await decoder.consume(
            async_lines([data_line(content="Hel"), data_line(content="lo"), DONE]),
            collect,
        )
        assert result.content == "Hello"
        assert [s.data for s in signals if s.type is SignalType.CONTENT] == ["Hel", "lo"]

    @pytest.mark.asyncio
    async def test_consume_stops_pulling_after_done(self, decoder):
        pulled = []

        async def source():
            for line in [data_line(content="a"), DONE, data_line(content="b")]:
                pulled.append(line)
                yield line

        result = await decoder.consume(source())
        assert result.content == "a"
        assert len(pulled) == 2

    @pytest.mark.asyncio
    async def test_read_error_fails_turn(self, decoder):
        lines = [data_line(content="partial"), data_line(content=" more"), DONE]
        result = await decoder.consume(async_lines(lines, fail_after=1))

        assert result.failed
        assert result.mode is DecoderMode.FAILED
        assert result.content == "partial"
        assert isinstance(result.error, StreamReadError)

    def test_sync_read_error_fails_turn(self, decoder):
        def source():
            yield data_line(content="partial")
            raise StreamReadError("Error reading stream: EOF")

        result = decoder.decode_lines(source())
        assert result.failed


class TestResolveTurn:
    def test_content_commits(self):
        result = StreamDecoder().decode_lines([data_line(content="x")])
        assert resolve_turn(result) is TurnOutcome.COMMITTED

    def test_reasoning_only_is_advisory(self):
        result = StreamDecoder().decode_lines([data_line(reasoning="r"), DONE])
        assert resolve_turn(result) is TurnOutcome.ADVISORY_ONLY

    def test_nothing_is_empty(self):
        result = StreamDecoder().decode_lines([DONE])
        assert resolve_turn(result) is TurnOutcome.EMPTY

    @pytest.mark.asyncio
    async def test_failure_wins_over_content(self):
        result = await StreamDecoder().consume(
            async_lines([data_line(content="visible"), DONE], fail_after=1)
        )
        assert result.content == "visible"
        assert resolve_turn(result) is TurnOutcome.FAILED
