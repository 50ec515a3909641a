"""
Sequential countdown phase.

Within an active cycle the dashboard shows one countdown at a time: the
deposit deadline until it passes, then the raffle, then nothing until the
data source reports the next cycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from market_timers.models.enums import CountdownPhase


@dataclass(frozen=True)
class PhaseInfo:
    phase: CountdownPhase
    active_timestamp_ms: int
    next_phase: Optional[CountdownPhase]
    description: str
    is_transitioning: bool


def resolve_countdown_phase(now_ms: int, deposit_ms: int, raffle_ms: int) -> PhaseInfo:
    """Pick the deadline the sequential countdown should point at."""
    if now_ms < deposit_ms:
        return PhaseInfo(
            phase=CountdownPhase.DEPOSIT,
            active_timestamp_ms=deposit_ms,
            next_phase=CountdownPhase.RAFFLE,
            description="Members can make their deposits now",
            is_transitioning=False,
        )

    if now_ms < raffle_ms:
        return PhaseInfo(
            phase=CountdownPhase.RAFFLE,
            active_timestamp_ms=raffle_ms,
            next_phase=CountdownPhase.DEPOSIT,
            description="Waiting for raffle to select winner",
            is_transitioning=False,
        )

    # raffle passed; next cycle depends on the data source
    return PhaseInfo(
        phase=CountdownPhase.TRANSITION,
        active_timestamp_ms=raffle_ms,
        next_phase=None,
        description="Raffle completed, next cycle starting soon",
        is_transitioning=True,
    )


def should_show_countdown(info: PhaseInfo) -> bool:
    return info.phase != CountdownPhase.TRANSITION


_TITLES = {
    CountdownPhase.DEPOSIT: "Next Deposit In:",
    CountdownPhase.RAFFLE: "Next Raffle",
    CountdownPhase.TRANSITION: "Cycle Complete",
}

_ACCENTS = {
    CountdownPhase.DEPOSIT: "ochre",
    CountdownPhase.RAFFLE: "forest",
    CountdownPhase.TRANSITION: "terracotta",
}


def countdown_title(phase: CountdownPhase) -> str:
    return _TITLES[phase]


def countdown_accent(phase: CountdownPhase) -> str:
    return _ACCENTS[phase]
