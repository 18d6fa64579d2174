from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class CommandTag(str, Enum):
    SCREENSHOT = "screenshot"
    TEXT = "text"
    HTML = "html"
    URL = "url"
    TITLE = "title"
    TABLES = "tables"
    LINKS = "links"
    GOTO = "goto"
    CLICK = "click"
    TYPE = "type"
    WAIT = "wait"
    SCROLL = "scroll"
    BACK = "back"
    FORWARD = "forward"
    REFRESH = "refresh"
    QUIT = "quit"
    UNKNOWN = "unknown"


# Tags written on their own, without a ':' argument
EXACT_TAGS = (
    CommandTag.SCREENSHOT,
    CommandTag.TEXT,
    CommandTag.HTML,
    CommandTag.URL,
    CommandTag.TITLE,
    CommandTag.TABLES,
    CommandTag.LINKS,
    CommandTag.BACK,
    CommandTag.FORWARD,
    CommandTag.REFRESH,
    CommandTag.QUIT,
)

PREFIXED_TAGS = (
    CommandTag.GOTO,
    CommandTag.CLICK,
    CommandTag.TYPE,
    CommandTag.WAIT,
    CommandTag.SCROLL,
)


@dataclass(frozen=True)
class Command:
    """A single parsed command line.

    ``raw`` keeps the trimmed source text so unknown commands can be echoed
    back verbatim.
    """
    tag: CommandTag
    args: Tuple[str, ...] = ()
    raw: str = ""

    @property
    def argument(self) -> str:
        return self.args[0] if self.args else ""

    @property
    def is_unknown(self) -> bool:
        return self.tag == CommandTag.UNKNOWN


class ClickStatus(str, Enum):
    CLICKED = "clicked"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass
class ClickOutcome:
    status: ClickStatus
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == ClickStatus.CLICKED


COMMAND_HELP: Dict[str, str] = {
    "screenshot": "Take a full-page screenshot",
    "text": "Extract all visible text from the page",
    "html": "Save the page HTML",
    "url": "Get the current URL",
    "title": "Get the page title",
    "tables": "Extract all tables from the page",
    "links": "Extract all links from the page",
    "goto:<url>": "Navigate to a URL",
    "click:<selector>": "Click an element (CSS selector or text)",
    "type:<selector>:<text>": "Type text into an input field",
    "wait:<seconds>": "Wait for specified seconds",
    "scroll:<direction>": "Scroll the page (up/down/top/bottom)",
    "back": "Go back in browser history",
    "forward": "Go forward in browser history",
    "refresh": "Refresh the current page",
    "quit": "Close the browser and exit",
}
