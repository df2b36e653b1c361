from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, List

from streamchat.agent.structs import Message


class BaseProvider(ABC):
    """
    The Abstract Base Class (Contract) for chat endpoints.
    """

    @abstractmethod
    def stream_chat(self, messages: List[Message]) -> AsyncIterator[str]:
        """
        Send one chat request and stream the raw response body.

        Yields:
            str: One SSE line at a time, line ending stripped

        Raises:
            ProviderError: Before the first line, for request/status failures
            StreamReadError: While iterating, if the body cannot be read
        """
        pass

    @abstractmethod
    async def list_models(self) -> Any:
        """
        Fetch the provider's model listing.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """
        Clean up resources (HTTP sessions, connections, etc.).
        """
        pass
