#!/usr/bin/env python3
"""
Token Estimation for StreamChat
Cheap character-based cost model used for context budgeting.

This is a policy, not a tokenizer: it over- or under-counts depending on
language and structure. Anything with the ``TokenEstimator`` signature
(for example a real tokenizer wrapper) can be passed to the context
strategy instead.
"""

from typing import Callable, Iterable

# Fixed per-message overhead (role markers, separators)
BASE_MESSAGE_COST = 5
CHARS_PER_TOKEN = 4

TokenEstimator = Callable[[str], int]


def estimate_tokens(text: str) -> int:
    """Estimated cost of one message body: ``5 + len(text) // 4``."""
    return BASE_MESSAGE_COST + len(text) // CHARS_PER_TOKEN


def estimate_total(texts: Iterable[str], estimator: TokenEstimator = estimate_tokens) -> int:
    """Sum of per-message estimates."""
    return sum(estimator(text) for text in texts)
