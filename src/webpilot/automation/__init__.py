"""Browser capability used by the command dispatcher.

Engines (Playwright, optionally Selenium) implement the BrowserEngine Protocol;
profile helpers locate installed browser user-data directories.
"""

from .engine import BrowserEngine
from .profiles import available_profiles, find_profile_dir, profile_root

__all__ = [
    'BrowserEngine',
    'available_profiles',
    'create_engine',
    'find_profile_dir',
    'profile_root',
]


def create_engine(name: str = "playwright"):
    """Instantiate the named engine, importing its driver lazily."""
    if name == "playwright":
        from .playwright_engine import PlaywrightEngine
        return PlaywrightEngine()
    if name == "selenium":
        from .selenium_engine import SeleniumEngine, SELENIUM_AVAILABLE
        if not SELENIUM_AVAILABLE:
            raise RuntimeError("Selenium not installed. Install extra: pip install .[automation-selenium]")
        return SeleniumEngine()
    raise ValueError(f"Unknown engine: {name}")
