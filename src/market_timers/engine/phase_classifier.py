"""
Lifecycle Phase Classifier

Maps a LifecyclePhase to the channels that carry a countdown in that phase,
the snapshot deadline feeding each channel and its terminal sentinel.
Pure lookup, no side effects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from market_timers.errors import TimerError
from market_timers.models.enums import LifecyclePhase, TimerChannel
from market_timers.models.snapshot import DeadlineSnapshot

LAUNCH_ENDED = "Launch period ended"
RAFFLE_DUE = "Raffle due now"
PAYMENT_DUE = "Payment due now"


@dataclass(frozen=True)
class ChannelRule:
    """One countdown channel: which snapshot field it counts down to"""
    channel: TimerChannel
    deadline_field: str
    sentinel: str

    def deadline(self, snapshot: DeadlineSnapshot) -> int:
        return getattr(snapshot, self.deadline_field)


@dataclass(frozen=True)
class PhasePlan:
    """Channels active in a phase; every other channel stays empty"""
    phase: LifecyclePhase
    rules: Tuple[ChannelRule, ...]

    @property
    def runs_tick(self) -> bool:
        return bool(self.rules)

    @property
    def active_channels(self) -> Tuple[TimerChannel, ...]:
        return tuple(rule.channel for rule in self.rules)

    @property
    def inactive_channels(self) -> Tuple[TimerChannel, ...]:
        active = self.active_channels
        return tuple(ch for ch in TimerChannel if ch not in active)


PHASE_PLANS: Dict[LifecyclePhase, PhasePlan] = {
    LifecyclePhase.LAUNCH: PhasePlan(
        phase=LifecyclePhase.LAUNCH,
        rules=(
            ChannelRule(TimerChannel.TIME_LEFT, "launch_deadline_ms", LAUNCH_ENDED),
        ),
    ),
    LifecyclePhase.ACTIVE: PhasePlan(
        phase=LifecyclePhase.ACTIVE,
        rules=(
            ChannelRule(TimerChannel.RAFFLE_TIME_LEFT, "raffle_deadline_ms", RAFFLE_DUE),
            ChannelRule(TimerChannel.DEPOSIT_TIME_LEFT, "deposit_window_end_ms", PAYMENT_DUE),
        ),
    ),
    LifecyclePhase.OTHER: PhasePlan(phase=LifecyclePhase.OTHER, rules=()),
}


def classify(phase: LifecyclePhase) -> PhasePlan:
    """
    Return the countdown plan for a phase.

    Raises:
        TimerError: phase has no plan (never silently falls back)
    """
    try:
        return PHASE_PLANS[phase]
    except KeyError:
        raise TimerError(f"No countdown plan for phase {phase!r}") from None
