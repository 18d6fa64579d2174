"""
Web Pilot session: owns the browser engine and runs the command poll loop.

An external process writes one command into the command file; the loop picks
it up, dispatches it against the browser and overwrites the result file.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from .automation import create_engine
from .core.channel import FileMailbox, Mailbox
from .core.config import PilotConfig
from .core.dispatcher import CommandDispatcher
from .core.errors import StartupError
from .core.parser import parse_command
from .core.session import Session

logger = logging.getLogger("webpilot")

READY_MESSAGE = "READY: Browser is open and waiting for commands."
NAVIGATION_HINT = "Check the URL and your network connection, or start without a URL."


class WebPilot:
    """Single-session pilot polling a mailbox for commands."""

    def __init__(
        self,
        config: Optional[PilotConfig] = None,
        engine=None,
        mailbox: Optional[Mailbox] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config or PilotConfig()
        self.engine = engine if engine is not None else create_engine(self.config.engine)
        self.mailbox = mailbox or FileMailbox(self.config.command_path, self.config.result_path)
        self.sleep = sleep
        self.session = Session()
        self.dispatcher = CommandDispatcher(self.engine, self.config, sleep=sleep, on_quit=self.stop)
        self._engine_started = False

    @property
    def running(self) -> bool:
        return self.session.running

    def start(self, initial_url: Optional[str] = None) -> None:
        """Launch the browser and get ready for commands.

        Raises:
            StartupError: If the browser or profile cannot be launched, or the
                starting URL cannot be opened
        """
        self.config.work_dir.mkdir(parents=True, exist_ok=True)
        self.engine.start(
            headless=self.config.headless,
            viewport=self.config.viewport,
            user_data_dir=self.config.profile,
            browser=self.config.browser,
        )
        self._engine_started = True
        if initial_url:
            logger.info(f"Navigating to: {initial_url}")
            try:
                self.engine.goto(initial_url, timeout_ms=self.config.timeout_ms)
            except Exception as e:
                self._release()
                reason = str(e).strip().splitlines()[0] if str(e).strip() else type(e).__name__
                raise StartupError(f"Failed to open {initial_url}: {reason}", hint=NAVIGATION_HINT) from e
        try:
            self.mailbox.clear()
            self.mailbox.write_result(READY_MESSAGE)
        except OSError as e:
            self._release()
            raise StartupError(
                f"Cannot write to {self.config.work_dir}: {e}",
                hint="Pass a writable working directory with --dir.",
            ) from e
        self.session.begin()

    def poll_once(self) -> bool:
        """Run one poll cycle; returns True if a command was dispatched."""
        if not self.session.running:
            return False
        try:
            text = self.mailbox.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Ignoring command file read error: {e}")
            return False
        command_text = (text or "").strip()
        if not self.session.accept(command_text):
            return False

        command = parse_command(command_text)
        logger.info(f"Command: {command_text}")
        result = self.dispatcher.dispatch(command)
        try:
            self.mailbox.write_result(result)
        except OSError as e:
            logger.warning(f"Could not write result for '{command_text}': {e}")
            return True
        if result.startswith("ERROR:"):
            logger.warning(result)
        else:
            logger.info("Done")
        return True

    def run(self) -> None:
        """Poll until a quit command (or stop()) ends the session."""
        logger.info("Listening for commands...")
        while self.session.running:
            self.sleep(self.config.poll_interval)
            self.poll_once()

    def stop(self) -> None:
        """Stop the loop and release the browser exactly once."""
        self.session.stop()
        self._release()

    def _release(self) -> None:
        if not self._engine_started:
            return
        self._engine_started = False
        try:
            self.engine.stop()
        finally:
            logger.info("Browser closed")

    def __enter__(self) -> "WebPilot":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
