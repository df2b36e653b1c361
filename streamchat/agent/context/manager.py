#!/usr/bin/env python3
"""
Context Manager
===============
Owns the conversation store and applies the context strategy under a budget.
"""

from typing import Dict, List, Optional

from streamchat.exceptions import BudgetExceededError, ContextValidationError

from .store import ContextStore
from .strategy import ContextStrategy, SuffixTruncationStrategy
from streamchat.agent.structs import Message
from streamchat.utils.token_estimation import estimate_tokens, estimate_total


class ContextManager:
    """
    Central hub for the conversation memory of one session.

    Callers get a reference to this object, never to the underlying list;
    the only writes are the ``add_*_message`` calls between turns.
    """

    def __init__(
        self,
        system_prompt_text: str = "",
        max_tokens: int = 32000,
        strategy: Optional[ContextStrategy] = None,
    ):
        if max_tokens <= 0:
            raise ContextValidationError(
                f"Invalid max_tokens value: {max_tokens}. Must be positive.",
                validation_type="max_tokens",
                invalid_value=max_tokens,
            )
        self.store = ContextStore(system_prompt_text)
        self.strategy = strategy or SuffixTruncationStrategy()
        self.max_tokens = max_tokens

    def add_user_message(self, content: str) -> Message:
        return self.store.append("user", content)

    def add_assistant_message(self, content: str, role: str = "assistant") -> Message:
        return self.store.append(role, content)

    def get_history(self) -> List[Message]:
        return self.store.snapshot()

    def get_context(self) -> List[Message]:
        """
        Messages to transmit for the next request.

        Raises:
            BudgetExceededError: If the system prompt alone exceeds the budget
        """
        return self.strategy.select(
            self.store.system_prompt(), self.store.snapshot(), self.max_tokens
        )

    def get_stats(self) -> Dict[str, int]:
        """
        Message count and the estimated size of the next context.
        A system prompt larger than the budget reports an empty context.
        """
        try:
            context = self.get_context()
        except BudgetExceededError:
            context = []

        estimator = getattr(self.strategy, "estimator", estimate_tokens)
        return {
            "conversation_length": len(self.store),
            "context_messages": len(context),
            "estimated_tokens": estimate_total((m.content for m in context), estimator),
            "token_limit": self.max_tokens,
        }
