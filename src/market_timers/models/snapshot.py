"""DeadlineSnapshot - immutable local copy of a cycle's deadlines"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from market_timers.models.enums import LifecyclePhase
from market_timers.models.lifecycle_record import LifecycleRecord, SnapshotKey

MS_PER_SECOND = 1000
DEFAULT_DEPOSIT_WINDOW_MS = 3 * 24 * 60 * 60 * 1000  # 259_200_000


@dataclass(frozen=True)
class DeadlineSnapshot:
    """
    Deadlines of one cycle in local millisecond epoch time.

    Captured exactly once per SnapshotKey and replaced wholesale when the key
    changes. deposit_window_end_ms is always derived from the window start.
    """
    key: SnapshotKey
    capture_instant_ms: int
    launch_deadline_ms: int
    raffle_deadline_ms: int
    deposit_window_start_ms: int
    deposit_window_end_ms: int

    @property
    def phase(self) -> LifecyclePhase:
        return self.key.phase

    @classmethod
    def capture(
        cls,
        record: LifecycleRecord,
        now_ms: int,
        deposit_window_ms: int = DEFAULT_DEPOSIT_WINDOW_MS,
    ) -> "DeadlineSnapshot":
        deposit_start_ms = record.deposit_window_start_sec * MS_PER_SECOND
        return cls(
            key=record.identity_key,
            capture_instant_ms=int(now_ms),
            launch_deadline_ms=record.launch_deadline_sec * MS_PER_SECOND,
            raffle_deadline_ms=record.raffle_deadline_sec * MS_PER_SECOND,
            deposit_window_start_ms=deposit_start_ms,
            deposit_window_end_ms=deposit_start_ms + deposit_window_ms,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.name,
            "captureInstant": self.capture_instant_ms,
            "launchDeadline": self.launch_deadline_ms,
            "raffleDeadline": self.raffle_deadline_ms,
            "depositWindowStart": self.deposit_window_start_ms,
            "depositWindowEnd": self.deposit_window_end_ms,
        }
