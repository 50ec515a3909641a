"""
Event bus: publishing, subscription, priority, filtering and middleware
"""

import pytest

from market_timers.models import TimerValues
from market_timers.models.events import EventType, SnapshotCapturedEvent, TimerValuesUpdatedEvent
from market_timers.services.event_bus import EventBus
from market_timers.services.middleware import log_middleware


def values_event(time_left: str) -> TimerValuesUpdatedEvent:
    return TimerValuesUpdatedEvent(values=TimerValues(time_left=time_left), previous=TimerValues())


@pytest.mark.asyncio
async def test_basic_pub_sub():
    bus = EventBus()
    received = []

    async def handler(event):
        received.append(event)

    bus.subscribe(EventType.TIMER_VALUES_UPDATED, handler)
    await bus.publish(values_event("1"))

    assert len(received) == 1
    assert received[0].values.time_left == "1"


@pytest.mark.asyncio
async def test_handlers_only_see_their_event_type():
    bus = EventBus()
    received = []
    bus.subscribe(EventType.SNAPSHOT_CAPTURED, received.append)

    await bus.publish(values_event("1"))

    assert received == []


@pytest.mark.asyncio
async def test_priority_order():
    bus = EventBus()
    order = []

    bus.subscribe(EventType.TIMER_VALUES_UPDATED, lambda e: order.append("low"), priority=1)
    bus.subscribe(EventType.TIMER_VALUES_UPDATED, lambda e: order.append("high"), priority=10)
    bus.subscribe(EventType.TIMER_VALUES_UPDATED, lambda e: order.append("mid"), priority=5)
    await bus.publish(values_event("1"))

    assert order == ["high", "mid", "low"]


@pytest.mark.asyncio
async def test_filtering():
    bus = EventBus()
    sentinel_events = []

    bus.subscribe(
        EventType.TIMER_VALUES_UPDATED,
        sentinel_events.append,
        filter_fn=lambda e: e.values.time_left == "Launch period ended",
    )
    await bus.publish(values_event("0d 0h 0m 1s"))
    await bus.publish(values_event("Launch period ended"))

    assert len(sentinel_events) == 1


@pytest.mark.asyncio
async def test_middleware_can_block():
    bus = EventBus()
    received = []
    bus.subscribe(EventType.TIMER_VALUES_UPDATED, received.append)
    bus.add_middleware(lambda e: None if e.values.time_left == "" else e)

    await bus.publish(values_event(""))
    await bus.publish(values_event("x"))

    assert [e.values.time_left for e in received] == ["x"]


@pytest.mark.asyncio
async def test_log_middleware_passes_events_through():
    bus = EventBus()
    received = []
    bus.subscribe(EventType.TIMER_VALUES_UPDATED, received.append)
    bus.add_middleware(log_middleware)

    await bus.publish(values_event("x"))

    assert len(received) == 1


@pytest.mark.asyncio
async def test_handler_failure_does_not_stop_others():
    bus = EventBus()
    received = []

    def broken(event):
        raise ValueError("broken handler")

    bus.subscribe(EventType.TIMER_VALUES_UPDATED, broken, priority=10)
    bus.subscribe(EventType.TIMER_VALUES_UPDATED, received.append)
    await bus.publish(values_event("x"))

    assert len(received) == 1


@pytest.mark.asyncio
async def test_unsubscribe_and_clear():
    bus = EventBus()
    received = []
    bus.subscribe(EventType.TIMER_VALUES_UPDATED, received.append)

    assert bus.unsubscribe(EventType.TIMER_VALUES_UPDATED, received.append)
    assert not bus.unsubscribe(EventType.TIMER_VALUES_UPDATED, received.append)
    assert bus.handler_count(EventType.TIMER_VALUES_UPDATED) == 0

    bus.subscribe(EventType.SNAPSHOT_CAPTURED, received.append)
    bus.clear()
    assert bus.handler_count(EventType.SNAPSHOT_CAPTURED) == 0


@pytest.mark.asyncio
async def test_event_history_is_bounded():
    bus = EventBus(history_limit=3)
    for i in range(5):
        await bus.publish(values_event(str(i)))

    history = bus.get_event_history(limit=10)
    assert [e.values.time_left for e in history] == ["2", "3", "4"]


def test_event_payload():
    event = SnapshotCapturedEvent(snapshot=None)

    assert event.type is EventType.SNAPSHOT_CAPTURED
    assert event.to_data() == {"snapshot": None, "previous": None}
