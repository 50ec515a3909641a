"""
Countdown Scheduler

Owns the single periodic tick that turns a DeadlineSnapshot plus the live
clock into remaining-time strings.

• One asyncio task per snapshot generation, never more than one alive
• Tick body is plain arithmetic, it never awaits
• Unchanged channel values are not re-emitted
• cancel() is synchronous: a cancelled generation can't tick again
"""

from __future__ import annotations

import asyncio
from typing import Callable, Dict, Optional

from market_timers.engine.clock import Clock, SYSTEM_CLOCK
from market_timers.engine.formatting import format_remaining
from market_timers.engine.phase_classifier import PhasePlan, classify
from market_timers.lifecycle.task_registry import create_tracked_task, TaskCategory
from market_timers.models.enums import FormatStyle, TimerChannel
from market_timers.models.snapshot import DeadlineSnapshot
from market_timers.models.timer_values import TimerValues
from market_timers.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SCHEDULER)

EmitCallback = Callable[[TimerChannel, str], None]


class CountdownScheduler:
    """
    Periodic countdown for one consumer.

    Example:
        scheduler = CountdownScheduler(on_emit=relay.push)
        scheduler.start(snapshot)   # immediate tick + 1s loop
        ...
        scheduler.cancel()          # no tick fires after this returns
    """

    def __init__(
        self,
        on_emit: EmitCallback,
        *,
        clock: Clock = SYSTEM_CLOCK,
        tick_interval_ms: int = 1000,
        format_style: FormatStyle = FormatStyle.FULL,
        owner: Optional[str] = None,
    ):
        self._on_emit = on_emit
        self._clock = clock
        self._interval = tick_interval_ms / 1000
        self._format_style = format_style
        self._owner = owner

        self._task: Optional[asyncio.Task] = None
        self._generation = 0
        self._snapshot: Optional[DeadlineSnapshot] = None
        self._plan: Optional[PhasePlan] = None
        self._last_emitted: Dict[TimerChannel, str] = {ch: "" for ch in TimerChannel}

        # metrics
        self.update_count = 0
        self.emit_count = 0

    # ------------------------------------------------------------
    # State
    # ------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def live_timer_count(self) -> int:
        return 1 if self.is_running else 0

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def snapshot(self) -> Optional[DeadlineSnapshot]:
        return self._snapshot

    @property
    def values(self) -> TimerValues:
        """Last emitted (raw, undebounced) values"""
        return TimerValues(
            time_left=self._last_emitted[TimerChannel.TIME_LEFT],
            raffle_time_left=self._last_emitted[TimerChannel.RAFFLE_TIME_LEFT],
            deposit_time_left=self._last_emitted[TimerChannel.DEPOSIT_TIME_LEFT],
        )

    # ------------------------------------------------------------
    # Control
    # ------------------------------------------------------------

    def start(self, snapshot: DeadlineSnapshot) -> None:
        """
        Start counting down to a new snapshot.

        Any running tick is cancelled first. Channels the phase doesn't own
        are cleared to "". Phases without countdowns start no task.
        """
        self.cancel()

        plan = classify(snapshot.phase)
        self._snapshot = snapshot
        self._plan = plan

        for channel in plan.inactive_channels:
            self._emit(channel, "")

        if not plan.runs_tick:
            log.info(f"No countdown for {plan.phase.name} phase, timers cleared")
            return

        self.tick()

        generation = self._generation
        self._task = create_tracked_task(
            self._run_loop(generation),
            category=TaskCategory.TICK,
            description=f"countdown tick #{generation} ({plan.phase.name})",
            created_by=self._owner,
        )

        log.info(
            f"Countdown started for {plan.phase.name} phase",
            channels=", ".join(ch.value for ch in plan.active_channels),
            interval_ms=int(self._interval * 1000),
        )

    def cancel(self) -> Optional[asyncio.Task]:
        """
        Cancel the running tick (if any).

        Returns the cancelled task so an owner can await its completion.
        """
        self._generation += 1
        task, self._task = self._task, None
        if task is None:
            return None

        if not task.done():
            task.cancel()

        log.debug(
            "Countdown tick cancelled",
            ticks=self.update_count,
            emitted=self.emit_count,
        )
        return task

    def stop(self) -> Optional[asyncio.Task]:
        """Cancel and forget the snapshot (scope disposal)."""
        task = self.cancel()
        self._snapshot = None
        self._plan = None
        return task

    # ------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------

    def tick(self) -> None:
        """Recompute every channel the current phase owns."""
        snapshot, plan = self._snapshot, self._plan
        if snapshot is None or plan is None:
            return

        now = self._clock.now_ms()
        self.update_count += 1

        for rule in plan.rules:
            remaining = rule.deadline(snapshot) - now
            if remaining <= 0:
                value = rule.sentinel
            else:
                value = format_remaining(remaining, self._format_style)
            self._emit(rule.channel, value)

        if self.update_count % 10 == 0:
            log.debug(f"Tick #{self.update_count}", values=self.values.to_dict())

    def _emit(self, channel: TimerChannel, value: str) -> None:
        if self._last_emitted[channel] == value:
            return
        self._last_emitted[channel] = value
        self.emit_count += 1
        self._on_emit(channel, value)

    async def _run_loop(self, generation: int) -> None:
        """Tick every interval against the loop clock until cancelled."""
        loop = asyncio.get_running_loop()
        next_at = loop.time() + self._interval

        while generation == self._generation:
            await asyncio.sleep(max(0.0, next_at - loop.time()))
            if generation != self._generation:
                break

            try:
                self.tick()
            except Exception as e:
                log.error("Countdown tick failed", exception=e)

            next_at += self._interval
            now = loop.time()
            if next_at < now:
                # fell more than a period behind; resync instead of bursting
                next_at = now + self._interval
