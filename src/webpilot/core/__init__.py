"""Web Pilot Core - command model, parser, dispatcher and mailboxes.

Nothing in this package imports a browser driver, so the whole command
pipeline can run against an in-memory mailbox and a fake engine.
"""

from .channel import FileMailbox, Mailbox, MemoryMailbox
from .config import PilotConfig
from .dispatcher import CommandDispatcher
from .errors import ConfigError, StartupError, WebPilotError
from .models import ClickOutcome, ClickStatus, Command, CommandTag, COMMAND_HELP
from .parser import parse_command
from .session import Session, SessionState

__all__ = [
    'COMMAND_HELP',
    'ClickOutcome',
    'ClickStatus',
    'Command',
    'CommandDispatcher',
    'CommandTag',
    'ConfigError',
    'FileMailbox',
    'Mailbox',
    'MemoryMailbox',
    'PilotConfig',
    'Session',
    'SessionState',
    'StartupError',
    'WebPilotError',
    'parse_command',
]
