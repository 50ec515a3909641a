"""
Timer Endpoints - countdown values, lifecycle input and snapshot inspection

All routes are mounted under /api/v1 by create_app().
"""

from typing import Optional

from fastapi import APIRouter, Depends

from market_timers.api.dependencies import get_provider
from market_timers.api.middleware.error_handler import InvalidLifecycleRecordError
from market_timers.api.schemas.timer import (
    CountdownPhaseResponse, LifecycleRecordRequest, LifecycleUpdateResponse,
    SnapshotResponse, TimerValuesResponse,
)
from market_timers.services.market_timer_provider import MarketTimerProvider
from market_timers.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)

router = APIRouter(prefix="/timers", tags=["Timers"])


@router.get("", response_model=TimerValuesResponse, summary="Current countdown values")
async def get_timers(provider: MarketTimerProvider = Depends(get_provider)) -> TimerValuesResponse:
    """Published (debounced) triple; "" means the channel is inactive."""
    return TimerValuesResponse.from_values(provider.values)


@router.get("/raw", response_model=TimerValuesResponse, summary="Latest tick output")
async def get_raw_timers(provider: MarketTimerProvider = Depends(get_provider)) -> TimerValuesResponse:
    return TimerValuesResponse.from_values(provider.raw_values)


@router.put("/lifecycle", response_model=LifecycleUpdateResponse, summary="Feed a lifecycle record")
async def put_lifecycle(
    request: LifecycleRecordRequest,
    provider: MarketTimerProvider = Depends(get_provider),
) -> LifecycleUpdateResponse:
    """
    Hand the provider a new lifecycle record.

    A record structurally equal to the tracked one leaves the countdown
    untouched (changed=false).
    """
    try:
        record = request.to_record()
    except (TypeError, ValueError) as e:
        raise InvalidLifecycleRecordError(str(e)) from e

    before = provider.snapshot
    snapshot = await provider.update(record)
    changed = snapshot is not before

    log.info(
        "Lifecycle record received",
        phase=record.phase.name,
        changed=changed,
    )
    return LifecycleUpdateResponse(changed=changed, snapshot=SnapshotResponse.from_snapshot(snapshot))


@router.get("/snapshot", response_model=Optional[SnapshotResponse], summary="Tracked deadline snapshot")
async def get_snapshot(provider: MarketTimerProvider = Depends(get_provider)) -> Optional[SnapshotResponse]:
    snapshot = provider.snapshot
    return SnapshotResponse.from_snapshot(snapshot) if snapshot else None


@router.get("/phase", response_model=Optional[CountdownPhaseResponse], summary="Sequential countdown phase")
async def get_phase(provider: MarketTimerProvider = Depends(get_provider)) -> Optional[CountdownPhaseResponse]:
    """Deposit → raffle → transition over the tracked snapshot (null before the first record)."""
    info = provider.countdown_phase()
    return CountdownPhaseResponse.from_info(info) if info else None
