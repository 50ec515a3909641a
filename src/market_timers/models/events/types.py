from enum import Enum, auto


class EventType(Enum):
    # Countdown lifecycle
    SNAPSHOT_CAPTURED = auto()

    # Published values (consumer-facing)
    TIMER_VALUES_UPDATED = auto()
