from .manager import ContextManager
from .store import ContextStore
from .strategy import ContextStrategy, SuffixTruncationStrategy
from streamchat.agent.structs import Message

__all__ = [
    "ContextManager",
    "ContextStore",
    "ContextStrategy",
    "SuffixTruncationStrategy",
    "Message",
]
