"""
ui/common.py
Shared visual utilities for consistency across UI modes.
Handles error formatting.
"""

from typing import Optional

from rich.console import Console
from rich.markup import escape


def render_shared_error(console: Console, message: str, hint: Optional[str] = None):
    """
    Unified error display: clear, bold red text with an optional dim hint line.
    """
    console.print()
    console.print(f"[bold red]❌ ERROR:[/bold red] {escape(str(message))}")
    if hint:
        console.print(f"[dim italic]Hint: {escape(hint)}[/]")
