"""
Middleware for EventBus

Middleware = pipeline functions that process events before handlers.
Can modify events, block events, or log/validate events.
"""

from market_timers.models.events import Event
from market_timers.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)


def log_middleware(event: Event) -> Event:
    """
    Log all events for debugging

    Usage:
        event_bus.add_middleware(log_middleware)
    """
    source_str = event.source.name if event.source else "-"
    log.debug(
        f"Event: {event.type.name} from {source_str}",
        fields=", ".join(sorted(event.to_data().keys())) or "-"
    )
    return event
