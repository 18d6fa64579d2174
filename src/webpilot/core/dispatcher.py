"""
Dispatch of parsed commands to browser actions.

Every CommandTag has exactly one handler in the dispatch table. Handlers
return the result string written to the result file; any exception raised
while acting on the browser is turned into an ``ERROR: <message>`` result so
the poll loop never stops on a per-command failure.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Optional

from .config import PilotConfig
from .models import ClickStatus, Command, CommandTag

logger = logging.getLogger("webpilot")

ERROR_PREFIX = "ERROR: "
MAX_LINKS = 50
SCROLL_STEP = 500
DEFAULT_WAIT_SECONDS = 2.0

TEXT_FILE = "page-text.txt"
HTML_FILE = "page.html"
TABLES_FILE = "tables.txt"

QUIT_MESSAGE = "QUIT: Browser closed. Goodbye!"

SCROLL_SCRIPTS = {
    "up": f"window.scrollBy(0, -{SCROLL_STEP})",
    "down": f"window.scrollBy(0, {SCROLL_STEP})",
    "top": "window.scrollTo(0, 0)",
    "bottom": "window.scrollTo(0, document.body.scrollHeight)",
}

SCROLL_MESSAGES = {
    "up": "Scrolled up",
    "down": "Scrolled down",
    "top": "Scrolled to top",
    "bottom": "Scrolled to bottom",
}


def _js_tables_script() -> str:
    # Returns an array of tables, each an array of rows of cell text
    return (
        "(() => Array.from(document.querySelectorAll('table')).map(table =>"
        " Array.from(table.querySelectorAll('tr')).map(row =>"
        "   Array.from(row.querySelectorAll('td, th'))"
        "     .map(cell => (cell.innerText || '').trim().replace(/\\s+/g, ' '))"
        " )"
        "))()"
    )


def _js_links_script() -> str:
    # Returns JSON array of {text, href}
    return (
        "(() => Array.from(document.querySelectorAll('a[href]'))"
        " .map(a => ({text: (a.innerText || '').trim(), href: a.href})))()"
    )


def format_tables(tables: List[List[List[str]]]) -> str:
    blocks = []
    for idx, rows in enumerate(tables, start=1):
        lines = [f"\n=== TABLE {idx} ==="]
        lines.extend(" | ".join(cells) for cells in rows)
        blocks.append("\n".join(lines) + "\n")
    return "\n".join(blocks)


def format_links(links: List[Dict[str, str]]) -> str:
    kept = [l for l in links if (l.get("text") or "").strip() and l.get("href")][:MAX_LINKS]
    lines = [f"{l['text'].strip()}: {l['href']}" for l in kept]
    return f"Found {len(kept)} links:\n" + "\n".join(lines)


def parse_seconds(value: str) -> float:
    """Parse a wait duration, falling back to the default for junk or non-positive input."""
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return DEFAULT_WAIT_SECONDS
    if not seconds > 0:
        return DEFAULT_WAIT_SECONDS
    return seconds


class CommandDispatcher:
    """Maps a Command onto the browser engine and produces a result string."""

    def __init__(
        self,
        engine,
        config: PilotConfig,
        sleep: Callable[[float], None] = time.sleep,
        on_quit: Optional[Callable[[], None]] = None,
    ):
        self.engine = engine
        self.config = config
        self.sleep = sleep
        self.on_quit = on_quit
        self._handlers: Dict[CommandTag, Callable[[Command], str]] = {
            CommandTag.SCREENSHOT: self._screenshot,
            CommandTag.TEXT: self._text,
            CommandTag.HTML: self._html,
            CommandTag.URL: self._url,
            CommandTag.TITLE: self._title,
            CommandTag.TABLES: self._tables,
            CommandTag.LINKS: self._links,
            CommandTag.GOTO: self._goto,
            CommandTag.CLICK: self._click,
            CommandTag.TYPE: self._type,
            CommandTag.WAIT: self._wait,
            CommandTag.SCROLL: self._scroll,
            CommandTag.BACK: self._back,
            CommandTag.FORWARD: self._forward,
            CommandTag.REFRESH: self._refresh,
            CommandTag.QUIT: self._quit,
            CommandTag.UNKNOWN: self._unknown,
        }
        missing = set(CommandTag) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for: {', '.join(sorted(t.value for t in missing))}")

    def dispatch(self, command: Command) -> str:
        """Run ``command`` and return its result; never raises."""
        try:
            return self._handlers[command.tag](command)
        except Exception as e:
            logger.debug(f"Command failed: {command.raw}", exc_info=True)
            return f"{ERROR_PREFIX}{e}"

    def _screenshot(self, command: Command) -> str:
        filepath = self.config.output_path(f"screenshot-{int(time.time() * 1000)}.png")
        self.engine.screenshot(str(filepath), full_page=True)
        return f"Screenshot saved: {filepath}"

    def _text(self, command: Command) -> str:
        text = self.engine.inner_text() or ""
        self.config.output_path(TEXT_FILE).write_text(text, encoding="utf-8")
        return text

    def _html(self, command: Command) -> str:
        filepath = self.config.output_path(HTML_FILE)
        filepath.write_text(self.engine.content(), encoding="utf-8")
        return f"HTML saved: {filepath}"

    def _url(self, command: Command) -> str:
        return f"URL: {self.engine.url}"

    def _title(self, command: Command) -> str:
        return f"Title: {self.engine.title()}"

    def _tables(self, command: Command) -> str:
        tables = format_tables(self.engine.evaluate(_js_tables_script()) or [])
        self.config.output_path(TABLES_FILE).write_text(tables, encoding="utf-8")
        return tables or "No tables found on page"

    def _links(self, command: Command) -> str:
        return format_links(self.engine.evaluate(_js_links_script()) or [])

    def _goto(self, command: Command) -> str:
        self.engine.goto(command.argument, timeout_ms=self.config.timeout_ms)
        return f"Navigated to: {self.engine.url}"

    def _click(self, command: Command) -> str:
        target = command.argument
        timeout = self.config.click_timeout_ms
        outcome = self.engine.click(target, timeout_ms=timeout)
        if outcome.status == ClickStatus.NOT_FOUND:
            logger.debug(f"No element for selector {target!r}, retrying as text")
            outcome = self.engine.click_text(target, timeout_ms=timeout)
        if not outcome.ok:
            return f"{ERROR_PREFIX}Could not click {target}: {outcome.message}"
        self.engine.wait_for_load_state("domcontentloaded")
        return f"Clicked: {target}"

    def _type(self, command: Command) -> str:
        selector, text = command.args
        self.engine.fill(selector, text)
        return f'Typed "{text}" into {selector}'

    def _wait(self, command: Command) -> str:
        seconds = parse_seconds(command.argument)
        self.sleep(seconds)
        return f"Waited {seconds:g} seconds"

    def _scroll(self, command: Command) -> str:
        direction = command.argument
        if direction not in SCROLL_SCRIPTS:
            return f"Unknown scroll direction: {direction}"
        self.engine.evaluate(SCROLL_SCRIPTS[direction])
        return SCROLL_MESSAGES[direction]

    def _back(self, command: Command) -> str:
        self.engine.back()
        return f"Navigated back to: {self.engine.url}"

    def _forward(self, command: Command) -> str:
        self.engine.forward()
        return f"Navigated forward to: {self.engine.url}"

    def _refresh(self, command: Command) -> str:
        self.engine.reload()
        return f"Refreshed: {self.engine.url}"

    def _quit(self, command: Command) -> str:
        if self.on_quit:
            self.on_quit()
        return QUIT_MESSAGE

    def _unknown(self, command: Command) -> str:
        return f"{ERROR_PREFIX}Unknown command: {command.raw}"
