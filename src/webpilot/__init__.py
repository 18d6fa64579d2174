# Avoid importing browser drivers at top-level to prevent side effects
__all__ = ["WebPilot", "PilotConfig", "parse_command"]

__version__ = "1.0.0"


def __getattr__(name):
    if name == "WebPilot":
        from .pilot import WebPilot
        return WebPilot
    if name == "PilotConfig":
        from .core.config import PilotConfig
        return PilotConfig
    if name == "parse_command":
        from .core.parser import parse_command
        return parse_command
    raise AttributeError(name)
