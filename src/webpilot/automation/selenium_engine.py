import logging
from typing import Optional, Tuple, Any

try:
    from selenium import webdriver
    from selenium.common.exceptions import (
        InvalidSelectorException,
        TimeoutException,
        WebDriverException,
    )
    from selenium.webdriver.common.by import By
    from selenium.webdriver.chrome.options import Options as ChromeOptions
    from selenium.webdriver.firefox.options import Options as FirefoxOptions
    from selenium.webdriver.support import expected_conditions as EC
    from selenium.webdriver.support.ui import WebDriverWait
    SELENIUM_AVAILABLE = True
except Exception:  # pragma: no cover - optional dependency
    SELENIUM_AVAILABLE = False

from ..core.errors import StartupError
from ..core.models import ClickOutcome, ClickStatus

logger = logging.getLogger("webpilot")

SELENIUM_BROWSERS = ("chromium", "chrome", "firefox")


def xpath_literal(value: str) -> str:
    """Quote ``value`` for use inside an XPath expression."""
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    parts = value.split("'")
    return "concat(" + ", \"'\", ".join(f"'{p}'" for p in parts) + ")"


class SeleniumEngine:
    def __init__(self):
        if not SELENIUM_AVAILABLE:
            raise RuntimeError("Selenium is not installed. Install with: pip install selenium")
        self._driver: Optional[webdriver.Remote] = None

    def start(
        self,
        headless: bool = False,
        viewport: Tuple[int, int] = (1400, 900),
        user_data_dir: Optional[str] = None,
        browser: str = "chromium",
    ) -> None:
        if browser not in SELENIUM_BROWSERS:
            raise StartupError(
                f"Selenium engine does not support '{browser}'",
                hint=f"Use one of: {', '.join(SELENIUM_BROWSERS)}, or --engine playwright.",
            )
        width, height = viewport
        if user_data_dir:
            logger.info(f"Using browser profile: {user_data_dir}")
        try:
            if browser == "firefox":
                options = FirefoxOptions()
                if headless:
                    options.add_argument("-headless")
                if user_data_dir:
                    options.add_argument("-profile")
                    options.add_argument(user_data_dir)
                self._driver = webdriver.Firefox(options=options)
            else:
                options = ChromeOptions()
                if headless:
                    options.add_argument("--headless=new")
                if user_data_dir:
                    options.add_argument(f"--user-data-dir={user_data_dir}")
                self._driver = webdriver.Chrome(options=options)
            self._driver.set_window_size(width, height)
        except WebDriverException as e:
            self.stop()
            raise StartupError.from_launch_failure(browser, e.msg or str(e))

    def stop(self) -> None:
        if self._driver:
            self._driver.quit()
            self._driver = None

    def goto(self, url: str, timeout_ms: int = 30000) -> None:
        assert self._driver is not None
        self._driver.set_page_load_timeout(timeout_ms / 1000.0)
        self._driver.get(url)

    @property
    def url(self) -> str:
        assert self._driver is not None
        return self._driver.current_url

    def title(self) -> str:
        assert self._driver is not None
        return self._driver.title

    def content(self) -> str:
        assert self._driver is not None
        return self._driver.page_source

    def inner_text(self) -> str:
        assert self._driver is not None
        return self._driver.execute_script("return document.body.innerText")

    def evaluate(self, script: str, arg: Any = None) -> Any:
        assert self._driver is not None
        return self._driver.execute_script(f"return {script}", arg)

    def click(self, selector: str, timeout_ms: int = 5000) -> ClickOutcome:
        return self._click((By.CSS_SELECTOR, selector), timeout_ms)

    def click_text(self, text: str, timeout_ms: int = 5000) -> ClickOutcome:
        xpath = f"//*[contains(normalize-space(text()), {xpath_literal(text)})]"
        return self._click((By.XPATH, xpath), timeout_ms)

    def _click(self, locator, timeout_ms: int) -> ClickOutcome:
        assert self._driver is not None
        try:
            elem = WebDriverWait(self._driver, timeout_ms / 1000.0).until(EC.element_to_be_clickable(locator))
            elem.click()
        except (TimeoutException, InvalidSelectorException) as e:
            return ClickOutcome(status=ClickStatus.NOT_FOUND, message=e.msg or f"No element matches {locator[1]}")
        except WebDriverException as e:
            return ClickOutcome(status=ClickStatus.FAILED, message=e.msg or str(e))
        return ClickOutcome(status=ClickStatus.CLICKED)

    def wait_for_load_state(self, state: str = "domcontentloaded") -> None:
        assert self._driver is not None
        ready = ("interactive", "complete") if state == "domcontentloaded" else ("complete",)
        WebDriverWait(self._driver, 30).until(
            lambda d: d.execute_script("return document.readyState") in ready
        )

    def fill(self, selector: str, value: str) -> None:
        assert self._driver is not None
        elem = self._driver.find_element(By.CSS_SELECTOR, selector)
        elem.clear()
        elem.send_keys(value)

    def back(self) -> None:
        assert self._driver is not None
        self._driver.back()

    def forward(self) -> None:
        assert self._driver is not None
        self._driver.forward()

    def reload(self) -> None:
        assert self._driver is not None
        self._driver.refresh()

    def screenshot(self, path: str, full_page: bool = True) -> None:
        assert self._driver is not None
        if full_page and hasattr(self._driver, "get_full_page_screenshot_as_file"):
            self._driver.get_full_page_screenshot_as_file(path)
        else:
            self._driver.save_screenshot(path)
