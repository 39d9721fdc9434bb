import json
from typing import List, Optional

import pytest

from runner.config import RunnerOptions
from runner.session_runner import SessionRunner


class FakeHelper:
    def __init__(self, events: List[tuple], fail_terminate: Optional[Exception] = None, note: Optional[str] = None):
        self.events = events
        self.fail_terminate = fail_terminate
        self.note = note
        self.terminate_calls = 0
        self.alive = True

    async def terminate(self):
        self.terminate_calls += 1
        self.events.append(("helper_terminate",))
        self.alive = False
        if self.fail_terminate:
            raise self.fail_terminate
        return self.note


class FakeLauncher:
    def __init__(self, events: List[tuple], fail: Optional[Exception] = None, **helper_kwargs):
        self.events = events
        self.fail = fail
        self.helper_kwargs = helper_kwargs
        self.helper: Optional[FakeHelper] = None

    async def start(self):
        self.events.append(("helper_start",))
        if self.fail:
            raise self.fail
        self.helper = FakeHelper(self.events, **self.helper_kwargs)
        return self.helper


class FakeSession:
    def __init__(self, events: List[tuple], fail_close: Optional[Exception] = None):
        self.events = events
        self.fail_close = fail_close
        self.page = object()
        self.close_calls = 0

    async def close(self):
        self.close_calls += 1
        self.events.append(("session_close",))
        if self.fail_close:
            raise self.fail_close


class FakeSessionFactory:
    def __init__(self, events: List[tuple], fail: Optional[Exception] = None, **session_kwargs):
        self.events = events
        self.fail = fail
        self.session_kwargs = session_kwargs
        self.session: Optional[FakeSession] = None

    async def open(self):
        self.events.append(("session_open",))
        if self.fail:
            raise self.fail
        self.session = FakeSession(self.events, **self.session_kwargs)
        return self.session


@pytest.fixture
def events():
    return []


@pytest.fixture
def fake_sleep(events):
    async def _sleep(seconds):
        events.append(("sleep", seconds))
    return _sleep


@pytest.fixture
def make_runner(events, fake_sleep):
    """Build a SessionRunner wired to fakes; returns (runner, launcher, factory)."""
    def _make(launcher_kwargs=None, factory_kwargs=None, **options):
        options.setdefault("warmup_delay", 5)
        options.setdefault("linger_delay", 5)
        launcher = FakeLauncher(events, **(launcher_kwargs or {}))
        factory = FakeSessionFactory(events, **(factory_kwargs or {}))
        runner = SessionRunner(RunnerOptions(**options), launcher=launcher, session_factory=factory, sleep=fake_sleep)
        return runner, launcher, factory
    return _make


@pytest.fixture
def log_events(capsys):
    """Parse the JSON log lines written so far."""
    def _read():
        entries = []
        for line in capsys.readouterr().out.splitlines():
            line = line.strip()
            if line.startswith("{"):
                entries.append(json.loads(line))
        return entries
    return _read
