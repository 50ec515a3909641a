from dataclasses import dataclass
from typing import Optional

from market_timers.models.events.base import Event
from market_timers.models.events.types import EventType
from market_timers.models.events.sources import EventSource
from market_timers.models.snapshot import DeadlineSnapshot
from market_timers.models.timer_values import TimerValues


@dataclass(init=False)
class SnapshotCapturedEvent(Event):
    """A new deadline snapshot replaced the previous one."""

    snapshot: DeadlineSnapshot
    previous: Optional[DeadlineSnapshot]

    def __init__(self, snapshot: DeadlineSnapshot, previous: Optional[DeadlineSnapshot] = None):
        super().__init__(
            type=EventType.SNAPSHOT_CAPTURED,
            source=EventSource.SNAPSHOT_CAPTURE,
        )
        self.snapshot = snapshot
        self.previous = previous


@dataclass(init=False)
class TimerValuesUpdatedEvent(Event):
    """
    Consumer-facing update.
    Always carries the full triple, never a single channel.
    """

    values: TimerValues
    previous: TimerValues

    def __init__(self, values: TimerValues, previous: TimerValues):
        super().__init__(
            type=EventType.TIMER_VALUES_UPDATED,
            source=EventSource.TIMER_PUBLISHER,
        )
        self.values = values
        self.previous = previous
