from enum import Enum, auto


class EventSource(Enum):
    """Event source identifiers for countdown events"""
    SNAPSHOT_CAPTURE = auto()
    TIMER_PUBLISHER = auto()
