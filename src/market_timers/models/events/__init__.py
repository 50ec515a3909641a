"""
Event models for the countdown subsystem
"""

from market_timers.models.events.types import EventType
from market_timers.models.events.base import Event
from market_timers.models.events.sources import EventSource
from market_timers.models.events.timer_events import (
    SnapshotCapturedEvent,
    TimerValuesUpdatedEvent,
)

__all__ = [
    "EventType",
    "Event",
    "EventSource",
    "SnapshotCapturedEvent",
    "TimerValuesUpdatedEvent",
]
