"""
tests/test_pilot.py - poll loop, session state and engine lifecycle.
"""
import pytest

from webpilot.core.channel import FileMailbox, MemoryMailbox
from webpilot.core.config import PilotConfig
from webpilot.core.dispatcher import QUIT_MESSAGE
from webpilot.core.errors import StartupError
from webpilot.core.session import SessionState
from webpilot.pilot import READY_MESSAGE, WebPilot

from tests.fakes.fake_engine import FakeEngine


def test_start_writes_ready_and_clears_stale_command(config, engine) -> None:
    mailbox = MemoryMailbox("stale command")
    pilot = WebPilot(config, engine=engine, mailbox=mailbox, sleep=lambda s: None)
    pilot.start("https://example.com")
    assert pilot.running
    assert mailbox.command is None
    assert mailbox.results == [READY_MESSAGE]
    assert engine.url == "https://example.com"
    assert engine.start_kwargs == {
        "headless": True,
        "viewport": (1400, 900),
        "user_data_dir": None,
        "browser": "chromium",
    }


def test_startup_error_is_fatal_and_leaves_stopped(config) -> None:
    engine = FakeEngine(startup_error=StartupError("Failed to launch chromium: boom", hint="try again"))
    pilot = WebPilot(config, engine=engine, mailbox=MemoryMailbox(), sleep=lambda s: None)
    with pytest.raises(StartupError) as excinfo:
        pilot.start()
    assert excinfo.value.hint == "try again"
    assert pilot.session.state == SessionState.STOPPED
    pilot.stop()
    assert engine.stop_count == 0


def test_initial_navigation_failure_releases_browser(config) -> None:
    engine = FakeEngine()
    engine.failing_urls.add("https://down.example")
    pilot = WebPilot(config, engine=engine, mailbox=MemoryMailbox(), sleep=lambda s: None)
    with pytest.raises(StartupError) as excinfo:
        pilot.start("https://down.example")
    assert str(excinfo.value) == "Failed to open https://down.example: Timeout 30000ms exceeded navigating to https://down.example"
    assert excinfo.value.hint
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert engine.stop_count == 1
    assert not pilot.running


def test_unwritable_work_dir_is_startup_error(config) -> None:
    class ReadOnlyMailbox(MemoryMailbox):
        def write_result(self, text: str) -> None:
            raise PermissionError("read-only file system")

    engine = FakeEngine()
    pilot = WebPilot(config, engine=engine, mailbox=ReadOnlyMailbox(), sleep=lambda s: None)
    with pytest.raises(StartupError, match="read-only file system"):
        pilot.start()
    assert engine.stop_count == 1
    assert not pilot.running


def test_poll_dispatches_and_writes_result(pilot, mailbox) -> None:
    mailbox.post("goto:https://example.com")
    assert pilot.poll_once()
    assert mailbox.last_result == "Navigated to: https://example.com"
    mailbox.post("url")
    assert pilot.poll_once()
    assert "https://example.com" in mailbox.last_result


def test_duplicate_command_is_dispatched_once(pilot, mailbox, engine) -> None:
    engine.titles["about:blank"] = "Home"
    mailbox.post("title")
    dispatched = [pilot.poll_once() for _ in range(5)]
    assert dispatched == [True, False, False, False, False]
    assert mailbox.results == [READY_MESSAGE, "Title: Home"]


def test_same_text_after_change_runs_again(pilot, mailbox, sleeps) -> None:
    mailbox.post("wait:1")
    pilot.poll_once()
    mailbox.post("wait:1")
    assert not pilot.poll_once()
    mailbox.post("url")
    pilot.poll_once()
    mailbox.post("wait:1")
    assert pilot.poll_once()
    assert sleeps == [1.0, 1.0]


def test_whitespace_variants_count_as_same_command(pilot, mailbox) -> None:
    mailbox.post("title\n")
    assert pilot.poll_once()
    mailbox.post("  title  ")
    assert not pilot.poll_once()


def test_empty_command_is_ignored(pilot, mailbox) -> None:
    mailbox.post("   \n")
    assert not pilot.poll_once()
    assert mailbox.results == [READY_MESSAGE]


def test_read_errors_are_swallowed(pilot, mailbox) -> None:
    def broken():
        raise PermissionError("locked by writer")

    mailbox.read = broken
    assert not pilot.poll_once()
    assert pilot.running


def test_missing_element_keeps_loop_running(pilot, mailbox) -> None:
    mailbox.post("click:#missing-element")
    pilot.poll_once()
    assert mailbox.last_result.startswith("ERROR:")
    assert pilot.running
    mailbox.post("scroll:sideways")
    pilot.poll_once()
    assert mailbox.last_result.startswith("Unknown scroll direction:")
    assert pilot.running


def test_quit_stops_and_releases_once(pilot, mailbox, engine) -> None:
    mailbox.post("quit")
    assert pilot.poll_once()
    assert mailbox.last_result == QUIT_MESSAGE
    assert pilot.session.state == SessionState.STOPPED
    assert engine.stop_count == 1

    mailbox.post("title")
    assert not pilot.poll_once()
    assert mailbox.last_result == QUIT_MESSAGE
    pilot.stop()
    assert engine.stop_count == 1


def test_run_loops_until_quit(config, engine) -> None:
    mailbox = MemoryMailbox()
    script = iter(["title", "title", "scroll:top", "quit"])
    sleeps = []

    def sleep(seconds):
        sleeps.append(seconds)
        mailbox.post(next(script))

    pilot = WebPilot(config, engine=engine, mailbox=mailbox, sleep=sleep)
    pilot.start()
    pilot.run()
    assert mailbox.results == [READY_MESSAGE, "Title: Fake Page", "Scrolled to top", QUIT_MESSAGE]
    assert sleeps == [config.poll_interval] * 4
    assert engine.stop_count == 1


def test_context_manager_releases_engine(config, engine) -> None:
    with WebPilot(config, engine=engine, mailbox=MemoryMailbox(), sleep=lambda s: None) as pilot:
        pilot.start()
    assert engine.stop_count == 1


def test_file_mailbox_round_trip(tmp_path) -> None:
    config = PilotConfig(work_dir=tmp_path, poll_interval=0.01)
    engine = FakeEngine()
    pilot = WebPilot(config, engine=engine, sleep=lambda s: None)
    config.command_path.write_text("old", encoding="utf-8")
    pilot.start()
    assert not config.command_path.exists()
    assert config.result_path.read_text(encoding="utf-8") == READY_MESSAGE

    assert not pilot.poll_once()
    config.command_path.write_text("goto:https://example.com\n", encoding="utf-8")
    assert pilot.poll_once()
    assert config.result_path.read_text(encoding="utf-8") == "Navigated to: https://example.com"
    assert isinstance(pilot.mailbox, FileMailbox)


def test_undecodable_command_file_is_skipped(tmp_path) -> None:
    config = PilotConfig(work_dir=tmp_path, poll_interval=0.01)
    pilot = WebPilot(config, engine=FakeEngine(), sleep=lambda s: None)
    pilot.start()
    config.command_path.write_bytes(b"\xff\xfe")
    assert not pilot.poll_once()
    assert pilot.running
    assert config.result_path.read_text(encoding="utf-8") == READY_MESSAGE

    config.command_path.write_text("title", encoding="utf-8")
    assert pilot.poll_once()
    assert config.result_path.read_text(encoding="utf-8").startswith("Title:")
