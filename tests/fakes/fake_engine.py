"""
Fake Browser Engine for Testing
===============================

Implements the BrowserEngine Protocol in memory so the dispatcher and poll
loop can be exercised without launching a browser.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

from webpilot.core.errors import StartupError
from webpilot.core.models import ClickOutcome, ClickStatus

PNG_HEADER = b"\x89PNG\r\n\x1a\n"


class FakeEngine:
    def __init__(
        self,
        selectors: Optional[Set[str]] = None,
        texts: Optional[Set[str]] = None,
        startup_error: Optional[StartupError] = None,
    ) -> None:
        self.selectors = set(selectors or ())
        self.texts = set(texts or ())
        self.startup_error = startup_error
        self.started = False
        self.start_kwargs: Dict[str, Any] = {}
        self.stop_count = 0
        self.history: List[str] = ["about:blank"]
        self.position = 0
        self.titles: Dict[str, str] = {}
        self.failing_urls: Set[str] = set()
        self.body_text = "Hello from the fake page"
        self.html = "<html><body>Hello</body></html>"
        self.tables: List[List[List[str]]] = []
        self.links: List[Dict[str, str]] = []
        self.scripts: List[str] = []
        self.fills: List[Tuple[str, str]] = []
        self.clicks: List[Tuple[str, str]] = []
        self.load_waits: List[str] = []
        self.reloads = 0

    def start(self, headless=False, viewport=(1400, 900), user_data_dir=None, browser="chromium") -> None:
        if self.startup_error is not None:
            raise self.startup_error
        self.started = True
        self.start_kwargs = {
            "headless": headless,
            "viewport": viewport,
            "user_data_dir": user_data_dir,
            "browser": browser,
        }

    def stop(self) -> None:
        self.stop_count += 1
        self.started = False

    def goto(self, url: str, timeout_ms: int = 30000) -> None:
        if url in self.failing_urls:
            raise RuntimeError(f"Timeout {timeout_ms}ms exceeded navigating to {url}")
        del self.history[self.position + 1:]
        self.history.append(url)
        self.position += 1

    @property
    def url(self) -> str:
        return self.history[self.position]

    def title(self) -> str:
        return self.titles.get(self.url, "Fake Page")

    def content(self) -> str:
        return self.html

    def inner_text(self) -> str:
        return self.body_text

    def evaluate(self, script: str, arg: Any = None) -> Any:
        self.scripts.append(script)
        if "querySelectorAll('table')" in script:
            return self.tables
        if "a[href]" in script:
            return self.links
        return None

    def click(self, selector: str, timeout_ms: int = 5000) -> ClickOutcome:
        self.clicks.append(("selector", selector))
        if selector in self.selectors:
            return ClickOutcome(status=ClickStatus.CLICKED)
        return ClickOutcome(status=ClickStatus.NOT_FOUND, message=f"Timeout {timeout_ms}ms exceeded waiting for {selector}")

    def click_text(self, text: str, timeout_ms: int = 5000) -> ClickOutcome:
        self.clicks.append(("text", text))
        if text in self.texts:
            return ClickOutcome(status=ClickStatus.CLICKED)
        return ClickOutcome(status=ClickStatus.NOT_FOUND, message=f"Timeout {timeout_ms}ms exceeded waiting for text {text}")

    def wait_for_load_state(self, state: str = "domcontentloaded") -> None:
        self.load_waits.append(state)

    def fill(self, selector: str, value: str) -> None:
        if selector not in self.selectors:
            raise RuntimeError(f"No element matches selector {selector}")
        self.fills.append((selector, value))

    def back(self) -> None:
        if self.position > 0:
            self.position -= 1

    def forward(self) -> None:
        if self.position < len(self.history) - 1:
            self.position += 1

    def reload(self) -> None:
        self.reloads += 1

    def screenshot(self, path: str, full_page: bool = True) -> None:
        Path(path).write_bytes(PNG_HEADER)
