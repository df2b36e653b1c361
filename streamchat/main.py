#!/usr/bin/env python3
"""
Application Starter for StreamChat
==================================

1. Loads configuration
2. Wires the components onto one event bus
3. Runs the read-eval loop
4. Handles graceful shutdown
"""

import asyncio
import logging
import signal
import sys
from typing import Optional

from streamchat.agent.command_dispatcher import (
    CommandDispatcher,
    is_command,
    parse_command,
)
from streamchat.agent.context import ContextManager
from streamchat.agent.service import ChatService
from streamchat.config import Settings, load_settings
from streamchat.exceptions import ChatBaseError, ConfigError
from streamchat.protocol import EventBus, EventTypes
from streamchat.providers import BaseProvider, OpenAICompatibleProvider
from streamchat.ui.plain import PlainUI
from streamchat.ui.plain.input import InputManager
from streamchat.utils.logger import EventLogger

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(settings: Settings):
    """Configure the root logger once: file if LOG_FILE is set, else stderr."""
    if settings.log_file:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(str(settings.log_file), mode="a", encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level)
    root_logger.addHandler(handler)


class Application:
    """Main application container."""

    def __init__(
        self,
        settings: Settings,
        provider: Optional[BaseProvider] = None,
        input_manager: Optional[InputManager] = None,
    ):
        self.settings = settings
        self.logger = logging.getLogger(__name__)
        self.running = False

        self.event_bus = EventBus()
        self.descriptor = settings.provider_descriptor()
        self.provider = provider or OpenAICompatibleProvider(
            self.descriptor, timeout=settings.request_timeout
        )
        self.context_manager = ContextManager(
            system_prompt_text=settings.system_prompt,
            max_tokens=settings.max_context_tokens,
        )
        self.service = ChatService(self.context_manager, self.provider, self.event_bus)
        self.dispatcher = CommandDispatcher(
            self.context_manager, self.provider, self.event_bus
        )
        self.ui = PlainUI(self.event_bus, input_manager=input_manager)
        self.event_logger = EventLogger(self.event_bus)

    async def start(self):
        """Subscribe listeners and run until exit."""
        await self.event_logger.start()
        await self.ui.start()

        self.ui.show_banner(self.descriptor.model, self.descriptor.provider)
        self.logger.info(
            "Session started: model=%s endpoint=%s",
            self.descriptor.model,
            self.descriptor.endpoint("chat"),
        )

        self.running = True
        try:
            await self.run_loop()
        finally:
            await self.stop()

    async def run_loop(self):
        while self.running:
            user_input = await self.ui.read_input()
            if user_input is None:  # EOF/Interrupt
                break

            text = user_input.strip()
            if not text:
                continue

            if is_command(text):
                keep_going = await self.dispatcher.dispatch(
                    parse_command(text, self.descriptor)
                )
                if not keep_going:
                    break
                continue

            await self.handle_turn(text)

    async def handle_turn(self, text: str):
        """One chat turn. Errors are reported and the loop continues."""
        try:
            await self.service.run_turn(text)
        except ChatBaseError as e:
            self.logger.error(
                "Turn failed: %s (%s) details=%s", e.message, type(e).__name__, e.details
            )
            await self.event_bus.emit(
                EventTypes.ERROR, {"message": e.message, "hint": e.user_hint}
            )
        except Exception as e:
            self.logger.exception("Unexpected error during turn")
            await self.event_bus.emit(
                EventTypes.ERROR, {"message": f"Unexpected error: {e}"}
            )

    async def stop(self):
        """Stop the application gracefully."""
        self.running = False
        try:
            await self.provider.close()
        except Exception as e:
            self.logger.error(f"Error closing provider session: {e}")


def signal_handler(app: Optional[Application], signum, frame):
    """Handle shutdown signals."""
    if app is not None:
        app.running = False
    raise KeyboardInterrupt


async def main():
    """Main entry point."""
    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"❌ Configuration Error: {e.message}", file=sys.stderr)
        sys.exit(1)

    setup_logging(settings)
    app = Application(settings)
    signal.signal(signal.SIGTERM, lambda s, f: signal_handler(app, s, f))

    await app.start()


def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\n[StreamChat] Interrupted by user")
        sys.exit(0)


if __name__ == "__main__":
    run()
