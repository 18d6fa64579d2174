"""
Discovery of installed browser profiles.

Maps a browser name to the default user-data directory on the current
platform so a session can reuse saved logins and cookies. Only Chromium
family browsers keep a single well-known root; Firefox and WebKit profiles
must be passed explicitly with --profile.
"""
from __future__ import annotations

import logging
import os
import platform
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger("webpilot")

PROFILE_BROWSERS = ("chrome", "chromium", "msedge")


def _default_roots(system: str, home: Path, environ) -> Dict[str, Path]:
    if system == "Darwin":
        support = home / "Library" / "Application Support"
        return {
            "chrome": support / "Google" / "Chrome",
            "chromium": support / "Chromium",
            "msedge": support / "Microsoft Edge",
        }
    if system == "Windows":
        local = Path(environ.get("LOCALAPPDATA") or home / "AppData" / "Local")
        return {
            "chrome": local / "Google" / "Chrome" / "User Data",
            "chromium": local / "Chromium" / "User Data",
            "msedge": local / "Microsoft" / "Edge" / "User Data",
        }
    config = Path(environ.get("XDG_CONFIG_HOME") or home / ".config")
    return {
        "chrome": config / "google-chrome",
        "chromium": config / "chromium",
        "msedge": config / "microsoft-edge",
    }


def profile_root(browser: str, system: Optional[str] = None, home: Optional[Path] = None, environ=None) -> Path:
    """Return the default user-data directory for ``browser``, existing or not.

    Raises:
        ValueError: If the browser has no known profile location
    """
    name = browser.lower()
    roots = _default_roots(system or platform.system(), home or Path.home(), os.environ if environ is None else environ)
    if name not in roots:
        raise ValueError(
            f"No known profile location for browser '{browser}'. "
            f"Choose from: {', '.join(PROFILE_BROWSERS)}"
        )
    return roots[name]


def find_profile_dir(browser: str, system: Optional[str] = None, home: Optional[Path] = None, environ=None) -> Optional[Path]:
    """Return the browser's profile directory if it exists on disk."""
    root = profile_root(browser, system=system, home=home, environ=environ)
    if root.is_dir():
        logger.debug(f"Found {browser} profile at {root}")
        return root
    logger.debug(f"No {browser} profile at {root}")
    return None


def available_profiles(system: Optional[str] = None, home: Optional[Path] = None, environ=None) -> Dict[str, Path]:
    """Return every discovered profile directory keyed by browser name."""
    found: Dict[str, Path] = {}
    for browser in PROFILE_BROWSERS:
        path = find_profile_dir(browser, system=system, home=home, environ=environ)
        if path is not None:
            found[browser] = path
    return found


def profile_names(root: Path) -> List[str]:
    """List the named profiles ("Default", "Profile 1", ...) inside a user-data root."""
    if not root.is_dir():
        return []
    names = []
    for child in sorted(root.iterdir()):
        if child.is_dir() and (child.name == "Default" or child.name.startswith("Profile ")):
            names.append(child.name)
    return names
