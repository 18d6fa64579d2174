from typing import Optional

LOCKED_PROFILE_MARKERS = ("processsingleton", "already in use", "singletonlock")

LOCKED_PROFILE_HINT = (
    "The profile directory is locked by another running browser. Close every "
    "window that uses this profile, or pass a copy of the profile directory with --profile."
)
MISSING_BROWSER_HINT = "Install the browser binaries with: playwright install"
DEFAULT_HINT = "Run with --debug for the full browser output."


class WebPilotError(Exception):
    """Base exception for Web Pilot errors."""
    pass


class ConfigError(WebPilotError):
    """Raised when a configuration value cannot be used."""
    pass


class StartupError(WebPilotError):
    """Raised when the browser or its profile fails to launch.

    This is the only fatal error kind; ``hint`` carries actionable guidance
    for the user.
    """

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint

    @classmethod
    def from_launch_failure(cls, browser: str, message: str) -> "StartupError":
        lowered = message.lower()
        if any(marker in lowered for marker in LOCKED_PROFILE_MARKERS):
            hint = LOCKED_PROFILE_HINT
        elif "executable doesn't exist" in lowered or "playwright install" in lowered:
            hint = MISSING_BROWSER_HINT
        else:
            hint = DEFAULT_HINT
        first_line = message.strip().splitlines()[0] if message.strip() else "unknown error"
        return cls(f"Failed to launch {browser}: {first_line}", hint=hint)
