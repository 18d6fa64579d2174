import logging
from typing import Optional, Tuple, Any

from playwright.sync_api import (
    sync_playwright,
    Page,
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
)

from ..core.errors import StartupError
from ..core.models import ClickOutcome, ClickStatus

logger = logging.getLogger("webpilot")

# Branded Chromium builds are launched through the chromium driver with a channel
CHROMIUM_CHANNELS = {"chrome": "chrome", "msedge": "msedge"}


class PlaywrightEngine:
    def __init__(self):
        self._pw = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    def start(
        self,
        headless: bool = False,
        viewport: Tuple[int, int] = (1400, 900),
        user_data_dir: Optional[str] = None,
        browser: str = "chromium",
    ) -> None:
        width, height = viewport
        launch_args = {"headless": headless}
        try:
            self._pw = sync_playwright().start()
            if browser in CHROMIUM_CHANNELS:
                launch_args["channel"] = CHROMIUM_CHANNELS[browser]
                browser_type = self._pw.chromium
            else:
                browser_type = getattr(self._pw, browser)
            if browser_type.name == "chromium":
                launch_args["args"] = ["--start-maximized"]

            if user_data_dir:
                logger.info(f"Using browser profile: {user_data_dir}")
                self._context = browser_type.launch_persistent_context(
                    user_data_dir, viewport={"width": width, "height": height}, **launch_args
                )
                pages = self._context.pages
                self._page = pages[0] if pages else self._context.new_page()
            else:
                self._browser = browser_type.launch(**launch_args)
                self._context = self._browser.new_context(viewport={"width": width, "height": height})
                self._page = self._context.new_page()
        except PlaywrightError as e:
            self.stop()
            raise StartupError.from_launch_failure(browser, e.message)

    def stop(self) -> None:
        if self._context:
            self._context.close()
        if self._browser:
            self._browser.close()
        if self._pw:
            self._pw.stop()
        self._page = None
        self._context = None
        self._browser = None
        self._pw = None

    def goto(self, url: str, timeout_ms: int = 30000) -> None:
        assert self._page is not None
        self._page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)

    @property
    def url(self) -> str:
        assert self._page is not None
        return self._page.url

    def title(self) -> str:
        assert self._page is not None
        return self._page.title()

    def content(self) -> str:
        assert self._page is not None
        return self._page.content()

    def inner_text(self) -> str:
        assert self._page is not None
        return self._page.evaluate("() => document.body.innerText")

    def evaluate(self, script: str, arg: Any = None) -> Any:
        assert self._page is not None
        return self._page.evaluate(script, arg)

    def click(self, selector: str, timeout_ms: int = 5000) -> ClickOutcome:
        assert self._page is not None
        try:
            self._page.click(selector, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            return ClickOutcome(status=ClickStatus.NOT_FOUND, message=e.message)
        except PlaywrightError as e:
            # Malformed selectors are retried as text
            if "selector" in e.message.lower():
                return ClickOutcome(status=ClickStatus.NOT_FOUND, message=e.message)
            return ClickOutcome(status=ClickStatus.FAILED, message=e.message)
        return ClickOutcome(status=ClickStatus.CLICKED)

    def click_text(self, text: str, timeout_ms: int = 5000) -> ClickOutcome:
        assert self._page is not None
        try:
            self._page.get_by_text(text).first.click(timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            return ClickOutcome(status=ClickStatus.NOT_FOUND, message=e.message)
        except PlaywrightError as e:
            return ClickOutcome(status=ClickStatus.FAILED, message=e.message)
        return ClickOutcome(status=ClickStatus.CLICKED)

    def wait_for_load_state(self, state: str = "domcontentloaded") -> None:
        assert self._page is not None
        self._page.wait_for_load_state(state)

    def fill(self, selector: str, value: str) -> None:
        assert self._page is not None
        self._page.fill(selector, value)

    def back(self) -> None:
        assert self._page is not None
        self._page.go_back()

    def forward(self) -> None:
        assert self._page is not None
        self._page.go_forward()

    def reload(self) -> None:
        assert self._page is not None
        self._page.reload()

    def screenshot(self, path: str, full_page: bool = True) -> None:
        assert self._page is not None
        self._page.screenshot(path=path, full_page=full_page)

