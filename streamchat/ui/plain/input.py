"""
ui/plain/input.py - Input Abstraction Layer
"""

import asyncio
from prompt_toolkit import PromptSession
from prompt_toolkit.patch_stdout import patch_stdout
from prompt_toolkit.formatted_text import HTML
from typing import Optional

USER_LABEL = "You: "


class InputManager:
    """
    Manages all user input operations using prompt_toolkit.
    Ensures proper stdout patching while the prompt is shown.
    """

    def __init__(self, session: Optional[PromptSession] = None):
        self.session = session or PromptSession()

    async def read_input(self) -> Optional[str]:
        """
        Read one line of user input.
        Returns None on KeyboardInterrupt/EOF to signal exit.
        """
        try:
            with patch_stdout():
                return await self.session.prompt_async(HTML(f"<b>{USER_LABEL}</b>"))
        except (KeyboardInterrupt, EOFError):
            return None  # Signal to the controller that we want to quit
        except asyncio.CancelledError:
            return None
