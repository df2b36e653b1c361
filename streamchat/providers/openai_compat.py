#!/usr/bin/env python3
"""
OpenAI-Compatible Chat Provider
===============================

aiohttp transport for any endpoint that speaks the chat-completions
protocol with ``stream: true`` (Server-Sent Events response body).
"""

import asyncio
import json
import logging
from typing import Any, AsyncIterable, AsyncIterator, Dict, List, Optional

import aiohttp

from streamchat.agent.structs import Message, ProviderDescriptor
from streamchat.exceptions import (
    ProviderAuthenticationError,
    ProviderConnectionError,
    ProviderRateLimitError,
    ProviderResponseError,
    StreamReadError,
)
from streamchat.providers.base import BaseProvider

logger = logging.getLogger("OpenAICompatibleProvider")

DEFAULT_MODELS_PATH = "/v1/models"
ERROR_SNIPPET_CHARS = 600


async def iter_sse_lines(content: AsyncIterable[bytes]) -> AsyncIterator[str]:
    """
    Decode a byte stream into text lines.

    Read failures from the transport surface as StreamReadError so the
    decoder never has to know about aiohttp.
    """
    try:
        async for raw_line in content:
            yield raw_line.decode("utf-8", errors="replace").rstrip("\r\n")
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise StreamReadError(
            f"Error reading stream: {str(e) or type(e).__name__}", original_error=e
        ) from e


class OpenAICompatibleProvider(BaseProvider):
    """
    Streams chat completions from the endpoint described by a ProviderDescriptor.
    """

    def __init__(self, descriptor: ProviderDescriptor, timeout: float = 420):
        self.descriptor = descriptor
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def provider_name(self) -> str:
        return self.descriptor.provider or "openai-compatible"

    async def _get_session(self) -> aiohttp.ClientSession:
        """
        Get or create the shared aiohttp session.
        """
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            headers = {
                "Authorization": f"Bearer {self.descriptor.api_key.get_secret_value()}",
            }
            self._session = aiohttp.ClientSession(timeout=timeout, headers=headers)
        return self._session

    def _prepare_payload(self, messages: List[Message]) -> Dict[str, Any]:
        """
        Request body: model, role/content pairs (no timestamps), streaming on.
        """
        return {
            "model": self.descriptor.model,
            "messages": [m.to_dict() for m in messages],
            "stream": True,
        }

    async def stream_chat(self, messages: List[Message]) -> AsyncIterator[str]:
        url = self.descriptor.endpoint("chat")
        if url is None:
            raise ProviderResponseError(
                "No 'chat' endpoint configured", provider_name=self.provider_name
            )

        session = await self._get_session()
        payload = self._prepare_payload(messages)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Chat request to %s: %s", url, json.dumps(payload, ensure_ascii=False)
            )

        try:
            response = await session.post(
                url,
                json=payload,
                headers={
                    "Accept": "text/event-stream",
                    "Connection": "keep-alive",
                },
            )
        except asyncio.TimeoutError as e:
            raise ProviderConnectionError(
                f"Timed out contacting LLM API after {self.timeout}s",
                provider_name=self.provider_name,
                model_name=self.descriptor.model,
                original_error=e,
            ) from e
        except aiohttp.ClientError as e:
            raise ProviderConnectionError(
                f"Failed to contact LLM API: {e}",
                provider_name=self.provider_name,
                model_name=self.descriptor.model,
                original_error=e,
            ) from e

        async with response:
            await self._check_error_status(response)
            async for line in iter_sse_lines(response.content):
                yield line

    async def _check_error_status(self, response: aiohttp.ClientResponse) -> None:
        """
        Map non-2xx responses to provider errors.
        """
        if response.status < 400:
            return

        try:
            error_text = await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("Error reading error response body: %s", e)
            error_text = ""
        snippet = error_text[:ERROR_SNIPPET_CHARS]
        common = {
            "provider_name": self.provider_name,
            "model_name": self.descriptor.model,
        }

        if response.status in (401, 403):
            raise ProviderAuthenticationError(
                f"LLM API rejected credentials ({response.status}): {snippet}", **common
            )
        if response.status == 429:
            retry_after = response.headers.get("Retry-After")
            raise ProviderRateLimitError(
                f"LLM API rate limit exceeded: {snippet}",
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
                **common,
            )
        raise ProviderResponseError(
            f"LLM API returned error status {response.status}: {snippet}",
            status_code=response.status,
            body_snippet=snippet,
            **common,
        )

    async def list_models(self) -> Any:
        """
        GET the model listing. Returns parsed JSON, or raw text when the
        body is not JSON.
        """
        url = self.descriptor.endpoint("list")
        if url is None:
            url = self.descriptor.url_base + DEFAULT_MODELS_PATH
            logger.warning(
                "'list' endpoint not defined in APIS, trying default '%s'",
                DEFAULT_MODELS_PATH,
            )

        session = await self._get_session()
        try:
            async with session.get(url) as response:
                await self._check_error_status(response)
                body = await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ProviderConnectionError(
                f"Error fetching models: {e}",
                provider_name=self.provider_name,
                original_error=e,
            ) from e

        try:
            return json.loads(body)
        except json.JSONDecodeError:
            return body

    async def close(self) -> None:
        """
        Close the HTTP session.
        """
        if self._session and not self._session.closed:
            await self._session.close()
