import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

from .errors import ConfigError

ENGINES = ("playwright", "selenium")
BROWSERS = ("chromium", "chrome", "msedge", "firefox", "webkit")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass
class PilotConfig:
    """Runtime settings for a Web Pilot session."""
    command_file: str = "command.txt"
    result_file: str = "result.txt"
    work_dir: Path = field(default_factory=Path.cwd)
    headless: bool = False
    poll_interval: float = 1.0
    timeout_ms: int = 30000
    click_timeout_ms: int = 5000
    viewport: Tuple[int, int] = (1400, 900)
    profile: Optional[str] = None
    browser: str = "chromium"
    engine: str = "playwright"

    def __post_init__(self):
        self.work_dir = Path(self.work_dir).expanduser().resolve()
        if not (self.poll_interval > 0) or not math.isfinite(self.poll_interval):
            raise ConfigError(f"Poll interval must be positive, got {self.poll_interval}")
        if not (self.timeout_ms > 0) or not math.isfinite(self.timeout_ms):
            raise ConfigError(f"Timeout must be positive, got {self.timeout_ms}")
        if self.engine not in ENGINES:
            raise ConfigError(f"Unknown engine '{self.engine}'. Choose from: {', '.join(ENGINES)}")
        if self.browser not in BROWSERS:
            raise ConfigError(f"Unknown browser '{self.browser}'. Choose from: {', '.join(BROWSERS)}")

    @property
    def command_path(self) -> Path:
        return self.work_dir / self.command_file

    @property
    def result_path(self) -> Path:
        return self.work_dir / self.result_file

    def output_path(self, filename: str) -> Path:
        return self.work_dir / filename

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "PilotConfig":
        """Build a config from WEB_PILOT_* environment variables.

        Keyword overrides that are not None win over the environment.
        """
        env = os.environ if environ is None else environ
        values = {}
        if env.get("WEB_PILOT_DIR"):
            values["work_dir"] = Path(env["WEB_PILOT_DIR"])
        if env.get("WEB_PILOT_POLL_INTERVAL"):
            values["poll_interval"] = _parse_number(env["WEB_PILOT_POLL_INTERVAL"], "WEB_PILOT_POLL_INTERVAL", float)
        if env.get("WEB_PILOT_TIMEOUT"):
            values["timeout_ms"] = _parse_number(env["WEB_PILOT_TIMEOUT"], "WEB_PILOT_TIMEOUT", int)
        if "WEB_PILOT_HEADLESS" in env:
            values["headless"] = _parse_bool(env["WEB_PILOT_HEADLESS"], "WEB_PILOT_HEADLESS")
        if env.get("WEB_PILOT_PROFILE"):
            values["profile"] = env["WEB_PILOT_PROFILE"]
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def _parse_number(value: str, name: str, kind):
    try:
        return kind(value)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got '{value}'")


def _parse_bool(value: str, name: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got '{value}'")
