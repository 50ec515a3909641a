"""
Countdown engine - snapshot capture, phase classification, tick scheduling
"""

from .clock import Clock, SystemClock, SYSTEM_CLOCK
from .formatting import format_remaining, split_remaining
from .phase_classifier import (
    ChannelRule, PhasePlan, PHASE_PLANS, classify,
    LAUNCH_ENDED, RAFFLE_DUE, PAYMENT_DUE,
)
from .snapshot_capture import SnapshotCapture
from .countdown_scheduler import CountdownScheduler
from .countdown_phase import (
    PhaseInfo, resolve_countdown_phase, should_show_countdown,
    countdown_title, countdown_accent,
)

__all__ = [
    "Clock",
    "SystemClock",
    "SYSTEM_CLOCK",
    "format_remaining",
    "split_remaining",
    "ChannelRule",
    "PhasePlan",
    "PHASE_PLANS",
    "classify",
    "LAUNCH_ENDED",
    "RAFFLE_DUE",
    "PAYMENT_DUE",
    "SnapshotCapture",
    "CountdownScheduler",
    "PhaseInfo",
    "resolve_countdown_phase",
    "should_show_countdown",
    "countdown_title",
    "countdown_accent",
]
