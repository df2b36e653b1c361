"""Tests for the plain terminal renderer driven through the event bus."""

import pytest
from rich.console import Console

from streamchat.protocol import EventBus, EventTypes
from streamchat.ui.plain import PlainUI
from streamchat.ui.plain.renderer import PlainRenderer


def make_ui():
    console = Console(record=True, width=120, color_system=None, force_terminal=False)
    bus = EventBus()
    # Input is never read in these tests
    ui = PlainUI(bus, renderer=PlainRenderer(console), input_manager=object())
    return bus, ui, console


class TestPlainUI:
    @pytest.mark.asyncio
    async def test_reasoning_then_answer_layout(self):
        bus, ui, console = make_ui()
        await ui.start()

        await bus.emit(EventTypes.THINKING_STARTED, {})
        await bus.emit(EventTypes.STREAM_CHUNK, {"thinking": "let me see"})
        await bus.emit(EventTypes.THINKING_STOPPED, {})
        await bus.emit(EventTypes.RESPONSE_STARTED, {})
        await bus.emit(EventTypes.STREAM_CHUNK, {"chunk": "Hel"})
        await bus.emit(EventTypes.STREAM_CHUNK, {"chunk": "lo"})
        await bus.emit(EventTypes.RESPONSE_COMPLETE, {"rendered": True})

        assert console.export_text() == "🤔 Reasoning: let me see\nBot: Hello\n"

    @pytest.mark.asyncio
    async def test_answer_interrupted_by_reasoning(self):
        bus, ui, console = make_ui()
        await ui.start()

        await bus.emit(EventTypes.RESPONSE_STARTED, {})
        await bus.emit(EventTypes.STREAM_CHUNK, {"chunk": "A"})
        await bus.emit(EventTypes.BLOCK_SEPARATOR, {})
        await bus.emit(EventTypes.THINKING_STARTED, {})
        await bus.emit(EventTypes.STREAM_CHUNK, {"thinking": "r"})
        await bus.emit(EventTypes.THINKING_STOPPED, {})
        await bus.emit(EventTypes.RESPONSE_STARTED, {})
        await bus.emit(EventTypes.STREAM_CHUNK, {"chunk": "B"})
        await bus.emit(EventTypes.RESPONSE_COMPLETE, {"rendered": True})

        assert console.export_text() == "Bot: A\n🤔 Reasoning: r\nBot: B\n"

    @pytest.mark.asyncio
    async def test_streamed_text_is_not_markup(self):
        bus, ui, console = make_ui()
        await ui.start()

        await bus.emit(EventTypes.RESPONSE_STARTED, {})
        await bus.emit(EventTypes.STREAM_CHUNK, {"chunk": "[bold]x[/bold]"})
        await bus.emit(EventTypes.RESPONSE_COMPLETE, {})

        assert "[bold]x[/bold]" in console.export_text()

    @pytest.mark.asyncio
    async def test_empty_response_prints_nothing(self):
        bus, ui, console = make_ui()
        await ui.start()

        await bus.emit(EventTypes.RESPONSE_COMPLETE, {"rendered": False})

        assert console.export_text() == ""

    @pytest.mark.asyncio
    async def test_command_results(self):
        bus, ui, console = make_ui()
        await ui.start()

        await bus.emit(EventTypes.COMMAND_RESULT, {"success": True, "message": "Goodbye!"})
        await bus.emit(
            EventTypes.COMMAND_RESULT, {"success": False, "message": "Unknown command: x"}
        )

        text = console.export_text()
        assert "Bot: Goodbye!" in text
        assert "ERROR: Unknown command: x" in text

    @pytest.mark.asyncio
    async def test_error_hint_printed_once(self):
        bus, ui, console = make_ui()
        await ui.start()

        await bus.emit(
            EventTypes.ERROR,
            {
                "message": "Error reading stream: reset",
                "hint": "Nothing from this reply was saved to the conversation.",
            },
        )

        text = console.export_text()
        assert "ERROR: Error reading stream: reset" in text
        assert text.count("Nothing from this reply was saved") == 1

    @pytest.mark.asyncio
    async def test_error_without_hint(self):
        bus, ui, console = make_ui()
        await ui.start()

        await bus.emit(EventTypes.ERROR, {"message": "Unexpected error: boom"})

        assert "Hint:" not in console.export_text()

    @pytest.mark.asyncio
    async def test_warning_rendered(self):
        bus, ui, console = make_ui()
        await ui.start()

        await bus.emit(
            EventTypes.WARNING,
            {"message": "Message does not fit the 20 token budget and was not sent."},
        )

        assert "[WARN] Message does not fit the 20 token budget" in console.export_text()
