import pytest

from market_timers.errors import TimerScopeError
from market_timers.models import TimerChannel, TimerValues
from market_timers.services.timer_publisher import TimerContextPublisher


@pytest.mark.asyncio
async def test_subscribers_receive_full_triple():
    publisher = TimerContextPublisher()
    received = []
    publisher.subscribe(received.append)

    await publisher.publish_channel(TimerChannel.RAFFLE_TIME_LEFT, "0d 1h 1m 40s")
    await publisher.publish_channel(TimerChannel.DEPOSIT_TIME_LEFT, "0d 0h 10m 0s")

    assert received == [
        TimerValues(raffle_time_left="0d 1h 1m 40s"),
        TimerValues(raffle_time_left="0d 1h 1m 40s", deposit_time_left="0d 0h 10m 0s"),
    ]
    assert publisher.values.to_dict() == {
        "timeLeft": "",
        "raffleTimeLeft": "0d 1h 1m 40s",
        "depositTimeLeft": "0d 0h 10m 0s",
    }


@pytest.mark.asyncio
async def test_equal_values_are_not_republished():
    publisher = TimerContextPublisher()
    received = []
    publisher.subscribe(received.append)

    await publisher.publish_channel(TimerChannel.TIME_LEFT, "x")
    await publisher.publish_channel(TimerChannel.TIME_LEFT, "x")
    await publisher.publish(TimerValues(time_left="x"))

    assert len(received) == 1
    assert publisher.publish_count == 1


@pytest.mark.asyncio
async def test_async_subscriber():
    publisher = TimerContextPublisher()
    received = []

    async def on_values(values):
        received.append(values.time_left)

    publisher.subscribe(on_values)
    await publisher.publish_channel(TimerChannel.TIME_LEFT, "y")

    assert received == ["y"]


@pytest.mark.asyncio
async def test_failing_subscriber_does_not_block_others():
    publisher = TimerContextPublisher()
    received = []

    def broken(values):
        raise RuntimeError("boom")

    publisher.subscribe(broken, priority=10)
    publisher.subscribe(received.append)
    await publisher.publish_channel(TimerChannel.TIME_LEFT, "z")

    assert len(received) == 1


@pytest.mark.asyncio
async def test_unsubscribe_stops_delivery():
    publisher = TimerContextPublisher()
    received = []
    subscription = publisher.subscribe(received.append)

    subscription.unsubscribe()
    await publisher.publish_channel(TimerChannel.TIME_LEFT, "gone")

    assert received == []
    assert publisher.subscriber_count == 0


@pytest.mark.asyncio
async def test_subscription_current_reads_latest():
    publisher = TimerContextPublisher()
    subscription = publisher.subscribe(lambda values: None)

    await publisher.publish_channel(TimerChannel.TIME_LEFT, "now")

    assert subscription.active
    assert subscription.current.time_left == "now"


@pytest.mark.asyncio
async def test_closed_publisher_invalidates_subscriptions():
    publisher = TimerContextPublisher()
    received = []
    subscription = publisher.subscribe(received.append)

    publisher.close()
    await publisher.publish_channel(TimerChannel.TIME_LEFT, "late")

    assert received == []
    assert not subscription.active
    with pytest.raises(TimerScopeError):
        subscription.current
    with pytest.raises(TimerScopeError):
        publisher.subscribe(received.append)
