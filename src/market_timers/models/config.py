"""Configuration models (parsed from YAML by ConfigManager)"""

from dataclasses import dataclass, field
from typing import List

from market_timers.models.enums import FormatStyle, LogLevel
from market_timers.models.snapshot import DEFAULT_DEPOSIT_WINDOW_MS


@dataclass(frozen=True)
class TimerConfig:
    """
    Countdown timing parameters.

    Defaults are the dashboard values: 1 s tick, 2 s debounce and a
    3 day deposit window.
    """
    tick_interval_ms: int = 1000
    debounce_ms: int = 2000
    deposit_window_ms: int = DEFAULT_DEPOSIT_WINDOW_MS
    format_style: FormatStyle = FormatStyle.FULL


@dataclass(frozen=True)
class LoggingConfig:
    level: LogLevel = LogLevel.INFO
    use_colors: bool = True


@dataclass(frozen=True)
class ApiConfig:
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class AppConfig:
    """Top-level configuration bundle"""
    timers: TimerConfig = field(default_factory=TimerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
