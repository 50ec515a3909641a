"""
Snapshot Capture

Turns lifecycle records into DeadlineSnapshots, reading the clock exactly
once per distinct SnapshotKey. Records that repeat the tracked key are
no-ops, whatever object they arrive in.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Tuple

from market_timers.engine.clock import Clock, SYSTEM_CLOCK
from market_timers.models.lifecycle_record import LifecycleRecord, SnapshotKey
from market_timers.models.snapshot import DeadlineSnapshot, DEFAULT_DEPOSIT_WINDOW_MS
from market_timers.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SNAPSHOT)


def _fmt_ms(ms: int) -> str:
    try:
        return datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M:%S")
    except (OverflowError, OSError, ValueError):
        # out-of-range deadlines still count down (to a sentinel)
        return f"{ms}ms"


class SnapshotCapture:
    """Tracks the current snapshot and replaces it when the key changes"""

    def __init__(self, clock: Clock = SYSTEM_CLOCK, deposit_window_ms: int = DEFAULT_DEPOSIT_WINDOW_MS):
        self._clock = clock
        self._deposit_window_ms = deposit_window_ms
        self._snapshot: Optional[DeadlineSnapshot] = None
        self.capture_count = 0

    @property
    def snapshot(self) -> Optional[DeadlineSnapshot]:
        return self._snapshot

    @property
    def key(self) -> Optional[SnapshotKey]:
        return self._snapshot.key if self._snapshot else None

    def observe(self, record: LifecycleRecord) -> Tuple[DeadlineSnapshot, bool]:
        """
        Observe a lifecycle record.

        Returns:
            (snapshot, changed) - changed is True only when a new snapshot
            was captured for a new identity key
        """
        key = record.identity_key
        if self._snapshot is not None and self._snapshot.key == key:
            return self._snapshot, False

        snapshot = DeadlineSnapshot.capture(
            record,
            now_ms=self._clock.now_ms(),
            deposit_window_ms=self._deposit_window_ms,
        )
        self._snapshot = snapshot
        self.capture_count += 1

        log.info(
            f"Deadlines captured for {key.phase.name} phase",
            launch_end=_fmt_ms(snapshot.launch_deadline_ms),
            raffle=_fmt_ms(snapshot.raffle_deadline_ms),
            deposit_start=_fmt_ms(snapshot.deposit_window_start_ms),
            deposit_end=_fmt_ms(snapshot.deposit_window_end_ms),
        )
        return snapshot, True

    def reset(self) -> None:
        """Forget the tracked snapshot; next observe() captures again."""
        self._snapshot = None
