"""
Remaining-time formatting.

Floor division on day/hour/minute/second bases, as the dashboard renders it.
Callers handle remaining <= 0 (sentinels) before formatting.
"""

from market_timers.models.enums import FormatStyle

MS_PER_DAY = 86_400_000
MS_PER_HOUR = 3_600_000
MS_PER_MINUTE = 60_000
MS_PER_SECOND = 1000


def split_remaining(remaining_ms: int):
    """Return (days, hours, minutes, seconds) for a positive duration."""
    days = remaining_ms // MS_PER_DAY
    hours = (remaining_ms % MS_PER_DAY) // MS_PER_HOUR
    minutes = (remaining_ms % MS_PER_HOUR) // MS_PER_MINUTE
    seconds = (remaining_ms % MS_PER_MINUTE) // MS_PER_SECOND
    return days, hours, minutes, seconds


def format_remaining(remaining_ms: int, style: FormatStyle = FormatStyle.FULL) -> str:
    """
    Format a positive duration.

    FULL:    "0d 1h 1m 40s"
    COMPACT: "2d 3h 4m" when days > 0, "1h 1m 40s" when hours > 0, else "1m 30s"
    """
    days, hours, minutes, seconds = split_remaining(int(remaining_ms))

    if style == FormatStyle.COMPACT:
        if days > 0:
            return f"{days}d {hours}h {minutes}m"
        if hours > 0:
            return f"{hours}h {minutes}m {seconds}s"
        return f"{minutes}m {seconds}s"

    return f"{days}d {hours}h {minutes}m {seconds}s"
