from dataclasses import dataclass
from enum import Enum


class SessionState(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class Session:
    """Per-process session state, mutated only by the poll loop."""
    last_command_seen: str = ""
    state: SessionState = SessionState.STOPPED

    @property
    def running(self) -> bool:
        return self.state == SessionState.RUNNING

    def begin(self) -> None:
        self.state = SessionState.RUNNING

    def stop(self) -> None:
        self.state = SessionState.STOPPED

    def accept(self, text: str) -> bool:
        """Record ``text`` as the latest command if it is new.

        Returns False for empty text or text equal to the last one seen, so a
        command is executed at most once per distinct consecutive value.
        """
        if not text or text == self.last_command_seen:
            return False
        self.last_command_seen = text
        return True
