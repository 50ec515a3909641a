"""
CountdownScheduler tests

The loop interval is shortened to 20ms; remaining time is driven by
FakeClock so every value is exact.
"""

import asyncio

import pytest

from conftest import TICK_MS, make_record, make_snapshot

from market_timers.engine.countdown_scheduler import CountdownScheduler
from market_timers.engine.phase_classifier import LAUNCH_ENDED, PAYMENT_DUE, RAFFLE_DUE
from market_timers.lifecycle.task_registry import TaskRegistry
from market_timers.models import FormatStyle, LifecyclePhase, TimerChannel


class Recorder:
    def __init__(self):
        self.emitted = []

    def __call__(self, channel, value):
        self.emitted.append((channel, value))

    def last(self, channel):
        values = [v for ch, v in self.emitted if ch == channel]
        return values[-1] if values else None


def make_scheduler(clock, recorder, **kwargs):
    return CountdownScheduler(on_emit=recorder, clock=clock, tick_interval_ms=TICK_MS, owner="test", **kwargs)


@pytest.mark.asyncio
async def test_launch_first_tick_is_immediate(clock, launch_record):
    recorder = Recorder()
    scheduler = make_scheduler(clock, recorder)

    scheduler.start(make_snapshot(launch_record))
    try:
        assert recorder.emitted == [(TimerChannel.TIME_LEFT, "0d 0h 1m 30s")]
        assert scheduler.values.time_left == "0d 0h 1m 30s"
        assert scheduler.is_running
    finally:
        scheduler.cancel()


@pytest.mark.asyncio
async def test_launch_sentinel_after_deadline(clock, launch_record):
    recorder = Recorder()
    scheduler = make_scheduler(clock, recorder)
    scheduler.start(make_snapshot(launch_record))

    clock.advance(90_000)
    scheduler.tick()
    scheduler.cancel()

    assert recorder.last(TimerChannel.TIME_LEFT) == LAUNCH_ENDED


@pytest.mark.asyncio
async def test_active_phase_values(clock, active_record):
    recorder = Recorder()
    scheduler = make_scheduler(clock, recorder)
    scheduler.start(make_snapshot(active_record))
    scheduler.cancel()

    assert recorder.last(TimerChannel.RAFFLE_TIME_LEFT) == "0d 1h 1m 40s"
    assert recorder.last(TimerChannel.DEPOSIT_TIME_LEFT) == "0d 0h 10m 0s"
    assert recorder.last(TimerChannel.TIME_LEFT) is None


@pytest.mark.asyncio
async def test_active_sentinels_are_independent(clock):
    recorder = Recorder()
    scheduler = make_scheduler(clock, recorder)
    record = make_record(raffle_in_sec=3_700, deposit_start_in_sec=-259_200 - 1)
    scheduler.start(make_snapshot(record))
    scheduler.cancel()

    assert recorder.last(TimerChannel.DEPOSIT_TIME_LEFT) == PAYMENT_DUE
    assert recorder.last(TimerChannel.RAFFLE_TIME_LEFT) == "0d 1h 1m 40s"

    clock.advance(3_700_000)
    scheduler.tick()
    assert recorder.last(TimerChannel.RAFFLE_TIME_LEFT) == RAFFLE_DUE


@pytest.mark.asyncio
async def test_deadline_exactly_now_is_sentinel(clock):
    recorder = Recorder()
    scheduler = make_scheduler(clock, recorder)
    scheduler.start(make_snapshot(make_record(phase=LifecyclePhase.LAUNCH, launch_in_sec=0)))
    scheduler.cancel()

    assert recorder.last(TimerChannel.TIME_LEFT) == LAUNCH_ENDED


@pytest.mark.asyncio
async def test_unchanged_values_are_not_reemitted(clock, launch_record):
    recorder = Recorder()
    scheduler = make_scheduler(clock, recorder)
    scheduler.start(make_snapshot(launch_record))
    scheduler.cancel()

    scheduler.tick()
    scheduler.tick()
    assert len(recorder.emitted) == 1

    clock.advance(1_000)
    scheduler.tick()
    assert recorder.emitted[-1] == (TimerChannel.TIME_LEFT, "0d 0h 1m 29s")
    assert scheduler.update_count == 4
    assert scheduler.emit_count == 2


@pytest.mark.asyncio
async def test_compact_format_style(clock, active_record):
    recorder = Recorder()
    scheduler = make_scheduler(clock, recorder, format_style=FormatStyle.COMPACT)
    scheduler.start(make_snapshot(active_record))
    scheduler.cancel()

    assert recorder.last(TimerChannel.RAFFLE_TIME_LEFT) == "1h 1m 40s"
    assert recorder.last(TimerChannel.DEPOSIT_TIME_LEFT) == "10m 0s"


@pytest.mark.asyncio
async def test_loop_keeps_ticking(clock, launch_record):
    scheduler = make_scheduler(clock, Recorder())
    scheduler.start(make_snapshot(launch_record))

    await asyncio.sleep(TICK_MS * 8 / 1000)
    task = scheduler.cancel()
    await asyncio.gather(task, return_exceptions=True)

    assert scheduler.update_count >= 3


@pytest.mark.asyncio
async def test_no_tick_after_cancel(clock, launch_record):
    scheduler = make_scheduler(clock, Recorder())
    scheduler.start(make_snapshot(launch_record))

    task = scheduler.cancel()
    ticks = scheduler.update_count
    await asyncio.sleep(TICK_MS * 4 / 1000)

    assert task.cancelled()
    assert scheduler.update_count == ticks
    assert not scheduler.is_running
    assert scheduler.live_timer_count == 0


@pytest.mark.asyncio
async def test_cancel_without_task_is_noop(clock):
    scheduler = make_scheduler(clock, Recorder())

    assert scheduler.cancel() is None
    assert scheduler.cancel() is None


@pytest.mark.asyncio
async def test_launch_to_active_clears_launch_channel(clock, launch_record, active_record):
    recorder = Recorder()
    scheduler = make_scheduler(clock, recorder)

    scheduler.start(make_snapshot(launch_record))
    first_generation = scheduler.generation
    scheduler.start(make_snapshot(active_record))
    await asyncio.sleep(0)

    try:
        assert scheduler.generation > first_generation
        assert recorder.last(TimerChannel.TIME_LEFT) == ""
        assert recorder.last(TimerChannel.RAFFLE_TIME_LEFT) == "0d 1h 1m 40s"
        assert len(TaskRegistry.instance().active(created_by="test")) == 1
    finally:
        scheduler.cancel()


@pytest.mark.asyncio
async def test_other_phase_clears_and_runs_no_task(clock, active_record):
    recorder = Recorder()
    scheduler = make_scheduler(clock, recorder)
    scheduler.start(make_snapshot(active_record))

    scheduler.start(make_snapshot(make_record(phase=LifecyclePhase.OTHER)))

    assert not scheduler.is_running
    assert recorder.last(TimerChannel.RAFFLE_TIME_LEFT) == ""
    assert recorder.last(TimerChannel.DEPOSIT_TIME_LEFT) == ""
    assert scheduler.values.to_dict() == {"timeLeft": "", "raffleTimeLeft": "", "depositTimeLeft": ""}


@pytest.mark.asyncio
async def test_other_phase_from_empty_emits_nothing(clock):
    recorder = Recorder()
    scheduler = make_scheduler(clock, recorder)

    scheduler.start(make_snapshot(make_record(phase=LifecyclePhase.OTHER)))

    assert recorder.emitted == []
    assert scheduler.live_timer_count == 0


@pytest.mark.asyncio
async def test_stop_forgets_snapshot(clock, launch_record):
    scheduler = make_scheduler(clock, Recorder())
    scheduler.start(make_snapshot(launch_record))

    scheduler.stop()
    scheduler.tick()

    assert scheduler.snapshot is None
    assert scheduler.update_count == 1
