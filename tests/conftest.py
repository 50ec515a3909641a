"""
Shared fixtures for countdown tests

Timing is shrunk (20ms tick, 50ms debounce) so tests run fast; wall-clock
time comes from FakeClock so formatted values are deterministic.
"""

import pytest

from market_timers.lifecycle.task_registry import TaskRegistry
from market_timers.models import LifecyclePhase, LifecycleRecord, TimerConfig
from market_timers.models.snapshot import DeadlineSnapshot

NOW_MS = 1_700_000_000_000
NOW_SEC = NOW_MS // 1000

TICK_MS = 20
DEBOUNCE_MS = 50


class FakeClock:
    """Manually advanced epoch-ms clock that counts reads"""

    def __init__(self, now_ms: int = NOW_MS):
        self.now = now_ms
        self.reads = 0

    def now_ms(self) -> int:
        self.reads += 1
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def make_record(
    phase=LifecyclePhase.ACTIVE,
    launch_in_sec: int = 90,
    raffle_in_sec: int = 3_700,
    deposit_start_in_sec: int = -259_200 + 600,
    **counters,
) -> LifecycleRecord:
    """Record with deadlines relative to NOW_SEC"""
    return LifecycleRecord(
        phase=phase,
        launch_deadline_sec=NOW_SEC + launch_in_sec,
        raffle_deadline_sec=NOW_SEC + raffle_in_sec,
        deposit_window_start_sec=NOW_SEC + deposit_start_in_sec,
        participant_counters=counters,
    )


def make_snapshot(record: LifecycleRecord, now_ms: int = NOW_MS) -> DeadlineSnapshot:
    return DeadlineSnapshot.capture(record, now_ms=now_ms)


@pytest.fixture(autouse=True)
def fresh_task_registry():
    """Each test gets its own task registry singleton"""
    TaskRegistry._instance = None
    yield
    TaskRegistry._instance = None


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fast_config():
    return TimerConfig(tick_interval_ms=TICK_MS, debounce_ms=DEBOUNCE_MS)


@pytest.fixture
def launch_record():
    return make_record(phase=LifecyclePhase.LAUNCH)


@pytest.fixture
def active_record():
    return make_record(phase=LifecyclePhase.ACTIVE)
