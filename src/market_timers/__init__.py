"""
Market Timers - adaptive countdowns for a market participation cycle.

    async with MarketTimerProvider(TimerConfig()) as timers:
        await timers.update(record)
        values = use_market_timer_context()
"""

__version__ = "1.0.0"

from market_timers.errors import ConfigError, TimerError, TimerScopeError
from market_timers.models import (
    DeadlineSnapshot,
    FormatStyle,
    LifecyclePhase,
    LifecycleRecord,
    SnapshotKey,
    TimerChannel,
    TimerConfig,
    TimerValues,
)
from market_timers.services import (
    MarketTimerProvider,
    current_provider,
    use_market_timer_context,
)

__all__ = [
    "__version__",
    "ConfigError",
    "TimerError",
    "TimerScopeError",
    "DeadlineSnapshot",
    "FormatStyle",
    "LifecyclePhase",
    "LifecycleRecord",
    "SnapshotKey",
    "TimerChannel",
    "TimerConfig",
    "TimerValues",
    "MarketTimerProvider",
    "current_provider",
    "use_market_timer_context",
]
