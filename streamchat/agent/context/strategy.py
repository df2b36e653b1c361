#!/usr/bin/env python3
"""
Context Strategy
================
Decides which slice of the history is transmitted for one turn.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from streamchat.agent.structs import Message
from streamchat.exceptions import BudgetExceededError
from streamchat.utils.token_estimation import TokenEstimator, estimate_tokens

logger = logging.getLogger(__name__)


class ContextStrategy(ABC):
    """Pure mapping from (system prompt, history, budget) to the messages to send."""

    @abstractmethod
    def select(
        self,
        system_prompt: Optional[Message],
        history: Sequence[Message],
        max_tokens: int,
    ) -> List[Message]:
        pass


class SuffixTruncationStrategy(ContextStrategy):
    """
    Greedy most-recent-first packing.

    Walks the history from newest to oldest and stops at the first message
    that would overflow the budget. Older messages are never considered after
    that point, so the result is always a contiguous recent suffix.
    """

    def __init__(self, estimator: TokenEstimator = estimate_tokens):
        self.estimator = estimator

    def select(
        self,
        system_prompt: Optional[Message],
        history: Sequence[Message],
        max_tokens: int,
    ) -> List[Message]:
        """
        Build the context for one request.

        Args:
            system_prompt: Optional system message, always first when present
            history: Full history, oldest first
            max_tokens: Budget for the estimated cost of everything returned

        Returns:
            List[Message]: [system_prompt?] + chronological suffix of history

        Raises:
            BudgetExceededError: If the system prompt alone exceeds max_tokens
        """
        current_tokens = 0

        if system_prompt is not None:
            system_tokens = self.estimator(system_prompt.content)
            if system_tokens > max_tokens:
                raise BudgetExceededError(
                    f"maxTokens ({max_tokens}) is smaller than the system prompt "
                    f"alone ({system_tokens})",
                    system_tokens=system_tokens,
                    max_tokens=max_tokens,
                )
            current_tokens = system_tokens

        selected: List[Message] = []
        for message in reversed(history):
            message_tokens = self.estimator(message.content)
            if current_tokens + message_tokens > max_tokens:
                break
            selected.append(message)
            current_tokens += message_tokens

        selected.reverse()

        logger.debug(
            "Selected %d of %d messages (%d/%d estimated tokens)",
            len(selected),
            len(history),
            current_tokens,
            max_tokens,
        )

        if system_prompt is not None:
            return [system_prompt] + selected
        return selected
