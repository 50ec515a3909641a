"""Lifecycle record - the external collaborator's view of one market cycle"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, NamedTuple

from market_timers.models.enums import LifecyclePhase


class SnapshotKey(NamedTuple):
    """
    Structural identity of a lifecycle record.

    Two records with equal keys describe the same logical cycle, whatever
    object they arrived in. A new snapshot is captured only when this changes.
    """
    phase: LifecyclePhase
    launch_sec: int
    raffle_sec: int
    deposit_start_sec: int


# camelCase names used by the chain / GraphQL data source
_FIELD_ALIASES = {
    "phase": ("phase", "state"),
    "launch_deadline_sec": ("launch_deadline_sec", "launchDeadlineSec", "launchPeriod"),
    "raffle_deadline_sec": ("raffle_deadline_sec", "raffleDeadlineSec", "nexRaffleTime"),
    "deposit_window_start_sec": (
        "deposit_window_start_sec", "depositWindowStartSec", "nextIntervalDepositTime"
    ),
}

_COUNTER_KEYS = (
    "totalParticipantsCount",
    "totalActiveParticipantsCount",
    "total_participants_count",
    "total_active_participants_count",
)


@dataclass(frozen=True)
class LifecycleRecord:
    """
    Already-validated lifecycle record supplied by the data source.

    Deadlines are epoch seconds. Participant counters ride along but are
    ignored by the countdown.
    """
    phase: LifecyclePhase
    launch_deadline_sec: int
    raffle_deadline_sec: int
    deposit_window_start_sec: int
    participant_counters: Dict[str, int] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "phase", LifecyclePhase.from_state(self.phase))
        object.__setattr__(self, "launch_deadline_sec", int(self.launch_deadline_sec))
        object.__setattr__(self, "raffle_deadline_sec", int(self.raffle_deadline_sec))
        object.__setattr__(self, "deposit_window_start_sec", int(self.deposit_window_start_sec))

    @property
    def identity_key(self) -> SnapshotKey:
        return SnapshotKey(
            phase=self.phase,
            launch_sec=self.launch_deadline_sec,
            raffle_sec=self.raffle_deadline_sec,
            deposit_start_sec=self.deposit_window_start_sec,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LifecycleRecord":
        """
        Build a record from a snake_case or camelCase mapping.

        Raises:
            KeyError: if a required field is missing under every alias
        """
        values = {}
        for name, aliases in _FIELD_ALIASES.items():
            for alias in aliases:
                if alias in data:
                    values[name] = data[alias]
                    break
            else:
                raise KeyError(f"Lifecycle record missing '{name}' (tried {', '.join(aliases)})")

        counters = dict(data.get("participant_counters") or data.get("participantCounters") or {})
        for key in _COUNTER_KEYS:
            if key in data:
                counters[key] = int(data[key])

        return cls(participant_counters=counters, **values)
