"""Mailboxes carrying command text in and result text out.

The poll loop only talks to a :class:`Mailbox`; the file-backed one keeps the
command.txt / result.txt interface, the in-memory one serves tests and
embedding code.
"""
from pathlib import Path
from typing import List, Optional, Protocol, Union


class Mailbox(Protocol):
    def read(self) -> Optional[str]:
        ...

    def write_result(self, text: str) -> None:
        ...

    def clear(self) -> None:
        ...


class FileMailbox:
    """Two UTF-8 files used as a rendezvous point, last write wins."""

    def __init__(self, command_path: Union[str, Path], result_path: Union[str, Path]):
        self.command_path = Path(command_path)
        self.result_path = Path(result_path)

    def read(self) -> Optional[str]:
        # Other OSErrors (permissions, partial writes on Windows) propagate;
        # the poll loop treats them as "no new command".
        try:
            return self.command_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def write_result(self, text: str) -> None:
        self.result_path.write_text(text, encoding="utf-8")

    def clear(self) -> None:
        try:
            self.command_path.unlink()
        except FileNotFoundError:
            pass


class MemoryMailbox:
    def __init__(self, command: Optional[str] = None):
        self.command = command
        self.results: List[str] = []

    def post(self, command: str) -> None:
        self.command = command

    @property
    def last_result(self) -> Optional[str]:
        return self.results[-1] if self.results else None

    def read(self) -> Optional[str]:
        return self.command

    def write_result(self, text: str) -> None:
        self.results.append(text)

    def clear(self) -> None:
        self.command = None
