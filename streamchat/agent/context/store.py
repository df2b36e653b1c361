from typing import List, Optional

from streamchat.agent.structs import Message


class ContextStore:
    """
    Passive, append-only container for conversation history.

    The system prompt is held apart from the history and is never part of
    a snapshot. Nothing here removes or rewrites an entry; bounding what is
    sent is the context strategy's job.
    """

    def __init__(self, system_prompt_text: str = ""):
        self._messages: List[Message] = []
        self._system_prompt: Optional[Message] = None
        # Whitespace-only prompts count as no prompt
        if system_prompt_text and system_prompt_text.strip():
            self._system_prompt = Message(role="system", content=system_prompt_text)

    def append(self, role: str, content: str) -> Message:
        """Appends a timestamped message to the history."""
        message = Message(role=role, content=content)
        self._messages.append(message)
        return message

    def snapshot(self) -> List[Message]:
        """Returns an independent copy of the history, oldest first."""
        return list(self._messages)

    def system_prompt(self) -> Optional[Message]:
        """Returns the configured system message, if any."""
        return self._system_prompt

    def __len__(self) -> int:
        return len(self._messages)
