"""Services layer"""

from .event_bus import EventBus
from .debounce_relay import DebounceRelay
from .timer_publisher import TimerContextPublisher, Subscription
from .market_timer_provider import (
    MarketTimerProvider,
    current_provider,
    use_market_timer_context,
)
from .middleware import log_middleware

__all__ = [
    "EventBus",
    "DebounceRelay",
    "TimerContextPublisher",
    "Subscription",
    "MarketTimerProvider",
    "current_provider",
    "use_market_timer_context",
    "log_middleware",
]
