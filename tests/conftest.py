"""
tests/conftest.py - shared fixtures.
Provides a config rooted in tmp_path, a fake engine and an in-memory mailbox;
no test launches a real browser.
"""
from typing import List

import pytest

from webpilot.core.channel import MemoryMailbox
from webpilot.core.config import PilotConfig
from webpilot.core.dispatcher import CommandDispatcher
from webpilot.pilot import WebPilot

from tests.fakes.fake_engine import FakeEngine


@pytest.fixture
def config(tmp_path) -> PilotConfig:
    return PilotConfig(work_dir=tmp_path, headless=True, poll_interval=0.01)


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine(selectors={"#submit", "#field", "input[name=q]"}, texts={"Sign in"})


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def dispatcher(engine, config, sleeps) -> CommandDispatcher:
    return CommandDispatcher(engine, config, sleep=sleeps.append)


@pytest.fixture
def mailbox() -> MemoryMailbox:
    return MemoryMailbox()


@pytest.fixture
def pilot(config, engine, mailbox, sleeps) -> WebPilot:
    p = WebPilot(config, engine=engine, mailbox=mailbox, sleep=sleeps.append)
    p.start()
    return p
