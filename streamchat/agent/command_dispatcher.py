#!/usr/bin/env python3
"""
Command Dispatcher Module

Slash commands as a closed set of tagged variants, parsed in one place and
handled in one place.
"""

import json
import logging
from dataclasses import dataclass
from typing import Union

from streamchat.agent.context import ContextManager
from streamchat.agent.structs import ProviderDescriptor
from streamchat.exceptions import ChatBaseError
from streamchat.protocol import EventBus, EventTypes
from streamchat.providers.base import BaseProvider

COMMAND_PREFIX = "/"
KEY_MASK = "***********"
KEY_VISIBLE_CHARS = 4

HELP_TEXT = """Available commands:
  /list      - List available models from the provider.
  /show      - Show the current provider configuration.
  /showModel - Show the currently selected model.
  /status    - Show conversation size and context usage.
  /help      - Display this help message.
  /exit      - Quit the chatbot."""

GOODBYE = "Goodbye!"


# --- Command Variants ---


@dataclass(frozen=True)
class ListModels:
    provider: ProviderDescriptor


@dataclass(frozen=True)
class ShowProvider:
    provider: ProviderDescriptor


@dataclass(frozen=True)
class ShowModel:
    provider: ProviderDescriptor


@dataclass(frozen=True)
class ShowStatus:
    pass


@dataclass(frozen=True)
class ShowHelp:
    pass


@dataclass(frozen=True)
class ExitSession:
    pass


@dataclass(frozen=True)
class UnknownCommand:
    name: str


Command = Union[
    ListModels, ShowProvider, ShowModel, ShowStatus, ShowHelp, ExitSession, UnknownCommand
]


def is_command(text: str) -> bool:
    return text.startswith(COMMAND_PREFIX)


def parse_command(text: str, provider: ProviderDescriptor) -> Command:
    """
    Map ``/name [args...]`` to its variant. Names are case-sensitive and
    arguments are ignored.
    """
    words = text.strip()[len(COMMAND_PREFIX):].split()
    name = words[0] if words else ""

    if name == "list":
        return ListModels(provider)
    if name == "show":
        return ShowProvider(provider)
    if name == "showModel":
        return ShowModel(provider)
    if name == "status":
        return ShowStatus()
    if name == "help":
        return ShowHelp()
    if name in ("exit", "quit"):
        return ExitSession()
    return UnknownCommand(name)


def mask_api_key(key: str) -> str:
    """Only the last four characters stay visible; short keys are fully hidden."""
    if len(key) <= KEY_VISIBLE_CHARS:
        return KEY_MASK
    return KEY_MASK + key[-KEY_VISIBLE_CHARS:]


class CommandDispatcher:
    """Centralized dispatcher for slash commands."""

    def __init__(
        self,
        context_manager: ContextManager,
        provider_client: BaseProvider,
        event_bus: EventBus,
    ):
        self.context_manager = context_manager
        self.provider_client = provider_client
        self.event_bus = event_bus
        self.logger = logging.getLogger(__name__)

    async def dispatch(self, command: Command) -> bool:
        """
        Handle one parsed command.

        Returns:
            bool: False if the session should end, True otherwise
        """
        self.logger.debug("Dispatching %s", type(command).__name__)

        if isinstance(command, ExitSession):
            await self._reply(GOODBYE)
            return False

        if isinstance(command, ListModels):
            await self._handle_list_models(command)
        elif isinstance(command, ShowProvider):
            await self._handle_show_provider(command)
        elif isinstance(command, ShowModel):
            await self._reply(f"Current model configured: {command.provider.model}")
        elif isinstance(command, ShowStatus):
            await self._handle_status()
        elif isinstance(command, ShowHelp):
            await self._reply(HELP_TEXT, context="help")
        elif isinstance(command, UnknownCommand):
            await self._reply(f"Unknown command: {command.name}", success=False)
            await self._reply(HELP_TEXT, context="help")
        else:
            raise TypeError(f"Unhandled command variant: {command!r}")
        return True

    async def _handle_list_models(self, command: ListModels):
        try:
            listing = await self.provider_client.list_models()
        except ChatBaseError as e:
            self.logger.error("Model listing failed: %s", e.message)
            await self._reply(f"Error fetching models: {e.message}", success=False)
            return

        if isinstance(listing, str):
            await self._reply(f"Available Models (raw response):\n{listing}")
        else:
            pretty = json.dumps(listing, indent=2, ensure_ascii=False)
            await self._reply(f"Available Models:\n{pretty}")

    async def _handle_show_provider(self, command: ShowProvider):
        provider = command.provider
        lines = [
            "--- Current Provider Configuration ---",
            f"Provider Name: {provider.provider}",
            f"Base URL: {provider.url_base}",
            f"API Key: {mask_api_key(provider.api_key.get_secret_value())}",
            f"Configured Model: {provider.model}",
            "API Endpoints:",
        ]
        lines.extend(f"  - {name}: {path}" for name, path in provider.apis.items())
        lines.append("------------------------------------")
        await self._reply("\n".join(lines))

    async def _handle_status(self):
        stats = self.context_manager.get_stats()
        token_percentage = stats["estimated_tokens"] / stats["token_limit"] * 100

        status_text = f"""Current State:

💬 Conversation Length: {stats['conversation_length']} messages
📨 Next Context: {stats['context_messages']} messages
🧮 Token Usage: {stats['estimated_tokens']:,} / {stats['token_limit']:,} ({token_percentage:.1f}%)"""
        await self._reply(status_text, context="status")

    async def _reply(self, message: str, success: bool = True, context: str = "command"):
        await self.event_bus.emit(
            EventTypes.COMMAND_RESULT,
            {"success": success, "message": message, "context": context},
        )
