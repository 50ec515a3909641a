"""
Enums for the market countdown subsystem
"""

from enum import Enum, IntEnum, auto


class MarketState(IntEnum):
    """Raw on-chain market state as reported by the data source"""
    INLAUNCH = 0
    LAUNCHFAILED = 1
    ACTIVE = 2
    COMPLETED = 3


class LifecyclePhase(Enum):
    """
    Lifecycle stage of a participation cycle, as seen by the countdown.

    LAUNCH: launch window open, one countdown (launch end)
    ACTIVE: cycle running, raffle + deposit countdowns
    OTHER: anything else (failed launch, completed, unknown) - no countdown
    """
    LAUNCH = auto()
    ACTIVE = auto()
    OTHER = auto()

    @classmethod
    def from_state(cls, state) -> "LifecyclePhase":
        """
        Map a raw market state (int, MarketState, name or LifecyclePhase)
        to a lifecycle phase. Unknown values map to OTHER.
        """
        if isinstance(state, LifecyclePhase):
            return state

        if isinstance(state, str):
            key = state.strip().upper()
            if key in cls.__members__:
                return cls[key]
            if key in MarketState.__members__:
                state = MarketState[key]
            elif not key.isdigit():
                return cls.OTHER

        try:
            market_state = MarketState(int(state))
        except (TypeError, ValueError):
            return cls.OTHER

        if market_state == MarketState.INLAUNCH:
            return cls.LAUNCH
        if market_state == MarketState.ACTIVE:
            return cls.ACTIVE
        return cls.OTHER


class TimerChannel(Enum):
    """Output channels; value is the consumer-facing key"""
    TIME_LEFT = "timeLeft"
    RAFFLE_TIME_LEFT = "raffleTimeLeft"
    DEPOSIT_TIME_LEFT = "depositTimeLeft"


class FormatStyle(Enum):
    """Remaining-time rendering styles"""
    FULL = auto()     # "1d 2h 3m 4s" - always all four units
    COMPACT = auto()  # "1d 2h 3m" / "2h 3m 4s" / "3m 4s"


class CountdownPhase(Enum):
    """Which deadline a sequential countdown is currently pointing at"""
    DEPOSIT = "deposit"
    RAFFLE = "raffle"
    TRANSITION = "transition"


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    SNAPSHOT = auto()    # Deadline capture
    SCHEDULER = auto()   # Countdown tick start/stop
    DEBOUNCE = auto()    # Debounce relay timers
    PUBLISHER = auto()   # Context publisher / subscriptions
    PROVIDER = auto()    # Provider scope enter/exit
    EVENT = auto()       # Event bus events and handling
    API = auto()
    SYSTEM = auto()      # Startup, shutdown, errors
    SHUTDOWN = auto()
    TASK = auto()
