"""TimerValues - the triple of formatted strings handed to consumers"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict

from market_timers.models.enums import TimerChannel

_CHANNEL_FIELDS = {
    TimerChannel.TIME_LEFT: "time_left",
    TimerChannel.RAFFLE_TIME_LEFT: "raffle_time_left",
    TimerChannel.DEPOSIT_TIME_LEFT: "deposit_time_left",
}


@dataclass(frozen=True)
class TimerValues:
    """Published countdown strings; empty before first capture"""
    time_left: str = ""
    raffle_time_left: str = ""
    deposit_time_left: str = ""

    def get(self, channel: TimerChannel) -> str:
        return getattr(self, _CHANNEL_FIELDS[channel])

    def with_channel(self, channel: TimerChannel, value: str) -> "TimerValues":
        """Return a copy with one channel replaced"""
        return replace(self, **{_CHANNEL_FIELDS[channel]: value})

    def to_dict(self) -> Dict[str, str]:
        return {channel.value: self.get(channel) for channel in TimerChannel}


EMPTY_TIMER_VALUES = TimerValues()
