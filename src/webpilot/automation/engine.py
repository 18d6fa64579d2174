from typing import Protocol, Optional, Tuple, Any

from ..core.models import ClickOutcome


class BrowserEngine(Protocol):
    def start(
        self,
        headless: bool = False,
        viewport: Tuple[int, int] = (1400, 900),
        user_data_dir: Optional[str] = None,
        browser: str = "chromium",
    ) -> None:
        ...

    def stop(self) -> None:
        ...

    def goto(self, url: str, timeout_ms: int = 30000) -> None:
        ...

    @property
    def url(self) -> str:
        ...

    def title(self) -> str:
        ...

    def content(self) -> str:
        ...

    def inner_text(self) -> str:
        ...

    def evaluate(self, script: str, arg: Any = None) -> Any:
        ...

    def click(self, selector: str, timeout_ms: int = 5000) -> ClickOutcome:
        ...

    def click_text(self, text: str, timeout_ms: int = 5000) -> ClickOutcome:
        ...

    def wait_for_load_state(self, state: str = "domcontentloaded") -> None:
        ...

    def fill(self, selector: str, value: str) -> None:
        ...

    def back(self) -> None:
        ...

    def forward(self) -> None:
        ...

    def reload(self) -> None:
        ...

    def screenshot(self, path: str, full_page: bool = True) -> None:
        ...
