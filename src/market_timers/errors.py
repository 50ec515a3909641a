"""Exceptions raised by the countdown subsystem"""


class TimerError(Exception):
    """Base class for countdown errors"""


class TimerScopeError(TimerError):
    """Published timer values were read outside an active provider scope"""

    def __init__(self, message: str = "use_market_timer_context must be used within a MarketTimerProvider"):
        super().__init__(message)


class ConfigError(TimerError):
    """Invalid or unreadable configuration"""
