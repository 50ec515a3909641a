"""
Timer Context Publisher

Fans out the current TimerValues triple to subscribers, one atomic update
per change. Runs on its own EventBus so timer consumers are isolated from
the rest of the application's events.
"""

from __future__ import annotations

import inspect
from typing import Callable, List, Optional

from market_timers.errors import TimerScopeError
from market_timers.models.enums import TimerChannel
from market_timers.models.events import EventType, TimerValuesUpdatedEvent
from market_timers.models.timer_values import TimerValues, EMPTY_TIMER_VALUES
from market_timers.services.event_bus import EventBus
from market_timers.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.PUBLISHER)

ValuesHandler = Callable[[TimerValues], None]


class Subscription:
    """
    Consumer handle bound to one publisher.

    Valid only while the publisher is open; reading through a closed handle
    is a contract violation and raises TimerScopeError.
    """

    def __init__(self, publisher: "TimerContextPublisher", handler: ValuesHandler):
        self._publisher = publisher
        self._handler = handler
        self._closed = False

    @property
    def active(self) -> bool:
        return not self._closed and not self._publisher.closed

    @property
    def current(self) -> TimerValues:
        if not self.active:
            raise TimerScopeError("Timer subscription used after its provider scope ended")
        return self._publisher.values

    def unsubscribe(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._publisher._remove(self)

    async def _dispatch(self, event: TimerValuesUpdatedEvent) -> None:
        if not self.active:
            return
        result = self._handler(event.values)
        if inspect.isawaitable(result):
            await result


class TimerContextPublisher:
    """
    Holds the published triple and notifies subscribers on change.

    Example:
        publisher = TimerContextPublisher()
        sub = publisher.subscribe(lambda values: print(values.time_left))
        await publisher.publish_channel(TimerChannel.TIME_LEFT, "0d 0h 1m 30s")
        publisher.close()
    """

    def __init__(self, event_bus: Optional[EventBus] = None):
        self._bus = event_bus or EventBus()
        self._values = EMPTY_TIMER_VALUES
        self._subscriptions: List[Subscription] = []
        self._closed = False
        self.publish_count = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def values(self) -> TimerValues:
        return self._values

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, handler: ValuesHandler, priority: int = 0) -> Subscription:
        """
        Register a handler (sync or async) receiving every new triple.

        Raises:
            TimerScopeError: publisher already closed
        """
        if self._closed:
            raise TimerScopeError("Cannot subscribe to timers outside an active MarketTimerProvider")

        subscription = Subscription(self, handler)
        self._subscriptions.append(subscription)
        self._bus.subscribe(EventType.TIMER_VALUES_UPDATED, subscription._dispatch, priority=priority)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
        self._bus.unsubscribe(EventType.TIMER_VALUES_UPDATED, subscription._dispatch)

    async def publish_channel(self, channel: TimerChannel, value: str) -> None:
        """Replace one channel and publish the resulting triple."""
        await self.publish(self._values.with_channel(channel, value))

    async def publish(self, values: TimerValues) -> None:
        if self._closed:
            log.debug("Publish on closed publisher ignored")
            return
        if values == self._values:
            return

        previous, self._values = self._values, values
        self.publish_count += 1
        await self._bus.publish(TimerValuesUpdatedEvent(values=values, previous=previous))

    def close(self) -> None:
        """End the scope: every subscription becomes invalid, no more updates."""
        if self._closed:
            return
        self._closed = True
        for subscription in self._subscriptions:
            subscription._closed = True
        count = len(self._subscriptions)
        self._subscriptions.clear()
        self._bus.clear()
        log.debug(f"Timer publisher closed ({count} subscriptions released)")
