"""
ui/plain/renderer.py - The View Layer

Responsible for all Rich console operations and formatting.
Never handles input - only rendering.
"""

from typing import Optional

from rich.console import Console
from rich.markup import escape

from streamchat.ui.common import render_shared_error

REASONING_PREFIX = "🤔 Reasoning: "
CONTENT_PREFIX = "Bot: "


class PlainRenderer:
    """
    Handles all visual output for Plain UI.
    Tracks whether the current response printed anything so it can be
    closed with a single newline.
    """

    def __init__(self, console: Console = None):
        self.console = console or Console(highlight=False)

        # State tracking
        self._in_thinking_block = False
        self._rendered_any = False

    def print_system(self, message: str):
        """Print [SYS] tag in blue/grey"""
        self.console.print(f"[bold blue][SYS][/bold blue] {escape(message)}")

    def print_reply(self, message: str):
        """Command output, shown as if the bot said it."""
        self.console.print(f"{CONTENT_PREFIX}{escape(message)}")

    def print_error(self, message: str, hint: Optional[str] = None):
        """Use shared utility for clear red text."""
        render_shared_error(self.console, message, hint)

    def print_warning(self, message: str):
        """Print [WARN] tag in yellow"""
        self.console.print(f"[bold yellow][WARN] {escape(message)}[/bold yellow]")

    def start_reasoning(self):
        self._in_thinking_block = True
        self._rendered_any = True
        self.console.print(REASONING_PREFIX, end="", style="bold magenta")

    def stop_reasoning(self):
        """End the reasoning line before the answer starts."""
        if self._in_thinking_block:
            self.console.print()
            self._in_thinking_block = False

    def start_content(self):
        self._rendered_any = True
        self.console.print(CONTENT_PREFIX, end="", style="bold green")

    def print_separator(self):
        self.console.print()

    def print_stream(self, text: str, is_thinking: bool = False):
        """Raw streamed text, no markup interpretation."""
        self.console.print(
            text,
            end="",
            markup=False,
            highlight=False,
            style="dim italic" if is_thinking else None,
        )

    def finish_response(self):
        """Close the response line, if one was opened."""
        if self._rendered_any:
            self.console.print()
        self._in_thinking_block = False
        self._rendered_any = False

    def print_startup_banner(self, model: str, provider: str):
        """Print the initial startup banner"""
        label = f"{model} ({provider})" if provider else model
        self.console.print(
            f"[bold green]StreamChat[/bold green] [dim]- {escape(label)}[/dim]\n"
            "[dim]Type '/help' for commands, '/exit' to quit.[/dim]"
        )
