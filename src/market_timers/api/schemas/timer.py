"""
Timer schemas - request/response models for the countdown endpoints

Field names follow the dashboard's camelCase wire format; snake_case is
accepted on input too.
"""

from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from market_timers.engine.countdown_phase import (
    PhaseInfo, countdown_accent, countdown_title, should_show_countdown,
)
from market_timers.models.lifecycle_record import LifecycleRecord
from market_timers.models.snapshot import DeadlineSnapshot
from market_timers.models.timer_values import TimerValues


class LifecycleRecordRequest(BaseModel):
    """Lifecycle record pushed by the data source"""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "state": 2,
                "launchPeriod": 1767225600,
                "nexRaffleTime": 1767830400,
                "nextIntervalDepositTime": 1767571200,
                "totalParticipantsCount": 12,
                "totalActiveParticipantsCount": 10
            }
        }
    )

    state: Union[int, str] = Field(
        description="Market state: 0/INLAUNCH, 2/ACTIVE, anything else means no countdown"
    )
    launch_deadline_sec: int = Field(alias="launchPeriod", description="Launch window end (epoch s)")
    raffle_deadline_sec: int = Field(alias="nexRaffleTime", description="Next raffle (epoch s)")
    deposit_window_start_sec: int = Field(
        alias="nextIntervalDepositTime", description="Next deposit window start (epoch s)"
    )
    total_participants_count: Optional[int] = Field(None, alias="totalParticipantsCount")
    total_active_participants_count: Optional[int] = Field(None, alias="totalActiveParticipantsCount")

    def to_record(self) -> LifecycleRecord:
        counters: Dict[str, int] = {}
        if self.total_participants_count is not None:
            counters["totalParticipantsCount"] = self.total_participants_count
        if self.total_active_participants_count is not None:
            counters["totalActiveParticipantsCount"] = self.total_active_participants_count

        return LifecycleRecord(
            phase=self.state,
            launch_deadline_sec=self.launch_deadline_sec,
            raffle_deadline_sec=self.raffle_deadline_sec,
            deposit_window_start_sec=self.deposit_window_start_sec,
            participant_counters=counters,
        )


class TimerValuesResponse(BaseModel):
    """Published countdown triple ("" = channel inactive)"""
    timeLeft: str
    raffleTimeLeft: str
    depositTimeLeft: str

    @classmethod
    def from_values(cls, values: TimerValues) -> "TimerValuesResponse":
        return cls(**values.to_dict())


class SnapshotResponse(BaseModel):
    """Deadlines (epoch ms) frozen at capture time"""
    phase: str
    captureInstant: int
    launchDeadline: int
    raffleDeadline: int
    depositWindowStart: int
    depositWindowEnd: int

    @classmethod
    def from_snapshot(cls, snapshot: DeadlineSnapshot) -> "SnapshotResponse":
        return cls(**snapshot.to_dict())


class LifecycleUpdateResponse(BaseModel):
    changed: bool = Field(description="False when the record matched the tracked snapshot")
    snapshot: SnapshotResponse


class CountdownPhaseResponse(BaseModel):
    """Sequential deposit → raffle countdown state"""
    phase: str
    title: str
    accent: str
    activeTimestampMs: int
    nextPhase: Optional[str] = None
    description: str
    isTransitioning: bool
    showCountdown: bool

    @classmethod
    def from_info(cls, info: PhaseInfo) -> "CountdownPhaseResponse":
        return cls(
            phase=info.phase.value,
            title=countdown_title(info.phase),
            accent=countdown_accent(info.phase),
            activeTimestampMs=info.active_timestamp_ms,
            nextPhase=info.next_phase.value if info.next_phase else None,
            description=info.description,
            isTransitioning=info.is_transitioning,
            showCountdown=should_show_countdown(info),
        )
