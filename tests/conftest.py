from datetime import datetime, timedelta, timezone

import pytest

from brayne.application.scheduler import SchedulingEngine

DAY = timedelta(days=1)


@pytest.fixture
def t0():
    """A fixed, timezone-aware starting instant."""
    return datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    return SchedulingEngine()


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/logs
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "BRAYNE_LEDGER_PATH",
        "BRAYNE_LOG_DIR",
        "BRAYNE_REPEAT_TIMEOUT_HOURS",
        "BRAYNE_VERBOSE",
    ):
        monkeypatch.delenv(var, raising=False)
    return home


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture
def clock(t0):
    return FakeClock(t0)
