"""
tests/test_channel.py - file and memory mailboxes.
"""
from webpilot.core.channel import FileMailbox, MemoryMailbox
from webpilot.core.session import Session, SessionState


def test_file_mailbox_missing_command_reads_none(tmp_path) -> None:
    box = FileMailbox(tmp_path / "command.txt", tmp_path / "result.txt")
    assert box.read() is None


def test_file_mailbox_reads_utf8(tmp_path) -> None:
    box = FileMailbox(tmp_path / "command.txt", tmp_path / "result.txt")
    (tmp_path / "command.txt").write_text("type:#q:café ☕", encoding="utf-8")
    assert box.read() == "type:#q:café ☕"


def test_file_mailbox_overwrites_result(tmp_path) -> None:
    box = FileMailbox(tmp_path / "command.txt", tmp_path / "result.txt")
    box.write_result("a much longer first result")
    box.write_result("short")
    assert (tmp_path / "result.txt").read_text(encoding="utf-8") == "short"


def test_file_mailbox_clear_is_safe_when_missing(tmp_path) -> None:
    box = FileMailbox(tmp_path / "command.txt", tmp_path / "result.txt")
    box.clear()
    (tmp_path / "command.txt").write_text("title", encoding="utf-8")
    box.clear()
    assert not (tmp_path / "command.txt").exists()


def test_memory_mailbox_records_results() -> None:
    box = MemoryMailbox()
    assert box.last_result is None
    box.post("title")
    assert box.read() == "title"
    box.write_result("one")
    box.write_result("two")
    assert box.results == ["one", "two"]
    box.clear()
    assert box.read() is None


def test_session_accept_compares_with_last_seen() -> None:
    session = Session()
    assert session.state == SessionState.STOPPED
    session.begin()
    assert session.running
    assert session.accept("title")
    assert not session.accept("title")
    assert not session.accept("")
    assert session.accept("url")
    assert session.last_command_seen == "url"
    session.stop()
    assert not session.running
