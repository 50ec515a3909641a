"""
Models package - data models for the countdown subsystem
"""

from .enums import (
    MarketState, LifecyclePhase, TimerChannel, FormatStyle, CountdownPhase,
    LogLevel, LogCategory,
)
from .lifecycle_record import LifecycleRecord, SnapshotKey
from .snapshot import DeadlineSnapshot, DEFAULT_DEPOSIT_WINDOW_MS
from .timer_values import TimerValues, EMPTY_TIMER_VALUES
from .config import TimerConfig, LoggingConfig, ApiConfig, AppConfig

__all__ = [
    'MarketState',
    'LifecyclePhase',
    'TimerChannel',
    'FormatStyle',
    'CountdownPhase',
    'LogLevel',
    'LogCategory',
    'LifecycleRecord',
    'SnapshotKey',
    'DeadlineSnapshot',
    'DEFAULT_DEPOSIT_WINDOW_MS',
    'TimerValues',
    'EMPTY_TIMER_VALUES',
    'TimerConfig',
    'LoggingConfig',
    'ApiConfig',
    'AppConfig',
]
