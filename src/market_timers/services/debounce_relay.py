"""Debounce Relay - per-channel trailing-edge coalescing of timer values"""

from __future__ import annotations

import asyncio
import inspect
from typing import Awaitable, Callable, Dict, List, Optional, Set, Union

from market_timers.lifecycle.task_registry import create_tracked_task, TaskCategory
from market_timers.models.enums import TimerChannel
from market_timers.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.DEBOUNCE)

DeliverCallback = Callable[[TimerChannel, str], Union[None, Awaitable[None]]]


class DebounceRelay:
    """
    Delays every channel independently and delivers only the last value.

    Each push restarts that channel's window, so a 1s tick with a 2s window
    delivers once the values stop changing (or, while they keep changing,
    whatever is current when a window finally closes).

    Key behavior:
    - N pushes to one channel inside a window → 1 delivery (the last value)
    - Channels never delay each other
    - After dispose() nothing is delivered, pending or in flight
    """

    def __init__(
        self,
        deliver: DeliverCallback,
        delay_ms: int = 2000,
        owner: Optional[str] = None,
    ):
        self._deliver = deliver
        self._delay = max(0, delay_ms) / 1000
        self._owner = owner

        self._timers: Dict[TimerChannel, asyncio.Task] = {}
        self._pending: Dict[TimerChannel, str] = {}
        self._inflight: Set[asyncio.Task] = set()
        self._disposed = False

        self.delivered_count = 0

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def pending(self) -> Dict[TimerChannel, str]:
        """Values waiting for their window to close"""
        return dict(self._pending)

    @property
    def live_timer_count(self) -> int:
        timers = sum(1 for t in self._timers.values() if not t.done())
        return timers + sum(1 for t in self._inflight if not t.done())

    def push(self, channel: TimerChannel, value: str) -> None:
        """Queue a value; restarts the channel's delay window."""
        if self._disposed:
            log.debug("Push after dispose ignored", channel=channel.value)
            return

        self._clear(channel)
        self._pending[channel] = value
        self._timers[channel] = create_tracked_task(
            self._deliver_after_delay(channel, value),
            category=TaskCategory.DEBOUNCE,
            description=f"debounce {channel.value}",
            created_by=self._owner,
        )

    def _clear(self, channel: TimerChannel) -> None:
        task = self._timers.pop(channel, None)
        if task is not None and not task.done():
            task.cancel()

    async def _deliver_after_delay(self, channel: TimerChannel, value: str) -> None:
        await asyncio.sleep(self._delay)

        me = asyncio.current_task()
        if self._disposed or self._timers.get(channel) is not me:
            return

        # from here on a new push must not cancel this delivery
        self._timers.pop(channel, None)
        self._pending.pop(channel, None)
        self._inflight.add(me)
        try:
            self.delivered_count += 1
            result = self._deliver(channel, value)
            if inspect.isawaitable(result):
                await result
        finally:
            self._inflight.discard(me)

    def dispose(self) -> List[asyncio.Task]:
        """
        Cancel every pending and in-flight delivery.

        Returns the cancelled tasks so an owner can await them.
        """
        self._disposed = True
        cancelled = []
        for task in list(self._timers.values()) + list(self._inflight):
            if not task.done():
                task.cancel()
                cancelled.append(task)
        self._timers.clear()
        self._inflight.clear()
        self._pending.clear()

        if cancelled:
            log.debug(f"Debounce relay disposed, {len(cancelled)} timers cancelled")
        return cancelled
