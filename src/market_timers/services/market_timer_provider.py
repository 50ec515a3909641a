"""
MarketTimerProvider - the scope that owns one consumer's countdown

Wires the pipeline:
    LifecycleRecord → SnapshotCapture → CountdownScheduler
                    → DebounceRelay → TimerContextPublisher → subscribers

Nothing is shared between providers: each owns its snapshot, its tick task
and its debounce timers. Leaving the scope cancels all of them before it
returns.

Example:
    async with MarketTimerProvider(TimerConfig()) as timers:
        await timers.update(record)
        values = use_market_timer_context()
"""

from __future__ import annotations

import asyncio
from contextvars import ContextVar
from typing import Any, List, Mapping, Optional, Union

from market_timers.engine.clock import Clock, SYSTEM_CLOCK
from market_timers.engine.countdown_phase import PhaseInfo, resolve_countdown_phase
from market_timers.engine.countdown_scheduler import CountdownScheduler
from market_timers.engine.snapshot_capture import SnapshotCapture
from market_timers.errors import TimerScopeError
from market_timers.models.config import TimerConfig
from market_timers.models.events import SnapshotCapturedEvent
from market_timers.models.lifecycle_record import LifecycleRecord
from market_timers.models.snapshot import DeadlineSnapshot
from market_timers.models.timer_values import TimerValues
from market_timers.services.debounce_relay import DebounceRelay
from market_timers.services.event_bus import EventBus
from market_timers.services.timer_publisher import Subscription, TimerContextPublisher, ValuesHandler
from market_timers.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.PROVIDER)

_current_provider: ContextVar[Optional["MarketTimerProvider"]] = ContextVar(
    "market_timer_provider", default=None
)

RecordInput = Union[LifecycleRecord, Mapping[str, Any]]


class MarketTimerProvider:
    """
    Provider scope for one consumer's timers.

    Args:
        config: timing parameters (tick, debounce, deposit window, format)
        clock: wall-clock source (tests inject a fake)
        event_bus: optional application bus; receives SnapshotCapturedEvent.
                   Timer values never go through it.
        name: owner tag used for task tracking and logs
    """

    def __init__(
        self,
        config: Optional[TimerConfig] = None,
        *,
        clock: Clock = SYSTEM_CLOCK,
        event_bus: Optional[EventBus] = None,
        name: Optional[str] = None,
    ):
        self.config = config or TimerConfig()
        self.name = name or f"market-timers-{id(self):x}"
        self._clock = clock
        self._event_bus = event_bus

        self._capture = SnapshotCapture(clock=clock, deposit_window_ms=self.config.deposit_window_ms)
        self._publisher = TimerContextPublisher()
        self._relay = DebounceRelay(
            deliver=self._publisher.publish_channel,
            delay_ms=self.config.debounce_ms,
            owner=self.name,
        )
        self._scheduler = CountdownScheduler(
            on_emit=self._relay.push,
            clock=clock,
            tick_interval_ms=self.config.tick_interval_ms,
            format_style=self.config.format_style,
            owner=self.name,
        )

        self._active = False
        self._disposed = False
        self._token = None

    # ------------------------------------------------------------------
    # Scope
    # ------------------------------------------------------------------

    async def __aenter__(self) -> "MarketTimerProvider":
        self.open()
        self._token = _current_provider.set(self)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            await self.dispose()
        finally:
            if self._token is not None:
                _current_provider.reset(self._token)
                self._token = None

    def open(self) -> None:
        """Activate the scope without binding it to the current context."""
        if self._disposed:
            raise TimerScopeError("MarketTimerProvider cannot be reopened after disposal")
        self._active = True
        log.debug(f"Provider {self.name} opened")

    @property
    def active(self) -> bool:
        return self._active

    def _ensure_active(self) -> None:
        if not self._active:
            raise TimerScopeError()

    async def dispose(self) -> None:
        """
        Tear down in order: tick, debounce timers, publisher.
        Waits for the cancelled tasks so none survive the scope.
        """
        if self._disposed:
            return
        self._disposed = True
        self._active = False

        cancelled: List[asyncio.Task] = []
        tick = self._scheduler.stop()
        if tick is not None:
            cancelled.append(tick)
        cancelled.extend(self._relay.dispose())
        self._publisher.close()
        self._capture.reset()

        current = asyncio.current_task()
        waitable = [t for t in cancelled if t is not current]
        if waitable:
            await asyncio.gather(*waitable, return_exceptions=True)

        log.info(
            f"Provider {self.name} disposed",
            ticks=self._scheduler.update_count,
            published=self._publisher.publish_count,
        )

    # shutdown-handler protocol (ShutdownCoordinator)
    @property
    def shutdown_priority(self) -> int:
        return 100

    async def shutdown(self) -> None:
        await self.dispose()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    async def update(self, record: RecordInput) -> DeadlineSnapshot:
        """
        Feed a lifecycle record from the data source.

        Same identity key as the tracked snapshot → no-op. Otherwise the
        running tick is cancelled first, a fresh snapshot is captured and
        a new tick (if the phase has countdowns) starts.
        """
        self._ensure_active()
        if not isinstance(record, LifecycleRecord):
            record = LifecycleRecord.from_dict(record)

        if self._capture.key == record.identity_key:
            return self._capture.snapshot

        self._scheduler.cancel()
        previous = self._capture.snapshot
        snapshot, _ = self._capture.observe(record)
        self._scheduler.start(snapshot)

        if self._event_bus is not None:
            await self._event_bus.publish(SnapshotCapturedEvent(snapshot=snapshot, previous=previous))

        return snapshot

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    @property
    def values(self) -> TimerValues:
        """Published (debounced) triple"""
        self._ensure_active()
        return self._publisher.values

    @property
    def raw_values(self) -> TimerValues:
        """Latest tick output, before debouncing"""
        self._ensure_active()
        return self._scheduler.values

    @property
    def snapshot(self) -> Optional[DeadlineSnapshot]:
        return self._capture.snapshot

    @property
    def scheduler(self) -> CountdownScheduler:
        return self._scheduler

    @property
    def relay(self) -> DebounceRelay:
        return self._relay

    @property
    def publisher(self) -> TimerContextPublisher:
        return self._publisher

    @property
    def live_timer_count(self) -> int:
        return self._scheduler.live_timer_count + self._relay.live_timer_count

    def subscribe(self, handler: ValuesHandler, priority: int = 0) -> Subscription:
        self._ensure_active()
        return self._publisher.subscribe(handler, priority=priority)

    def countdown_phase(self, now_ms: Optional[int] = None) -> Optional[PhaseInfo]:
        """Sequential deposit → raffle phase over the current snapshot."""
        snapshot = self._capture.snapshot
        if snapshot is None:
            return None
        now = self._clock.now_ms() if now_ms is None else now_ms
        return resolve_countdown_phase(
            now, snapshot.deposit_window_start_ms, snapshot.raffle_deadline_ms
        )


def current_provider() -> MarketTimerProvider:
    """
    The provider whose scope encloses the caller.

    Raises:
        TimerScopeError: called outside an active provider scope
    """
    provider = _current_provider.get()
    if provider is None or not provider.active:
        raise TimerScopeError()
    return provider


def use_market_timer_context() -> TimerValues:
    """
    Current published timer values for the enclosing provider scope.

    Raises:
        TimerScopeError: called outside an active provider scope
    """
    return current_provider().values
