"""
Config Manager

Loads modular YAML configuration (include system) and builds the typed
TimerConfig / LoggingConfig / ApiConfig bundle.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from market_timers.errors import ConfigError
from market_timers.models.config import ApiConfig, AppConfig, LoggingConfig, TimerConfig
from market_timers.models.enums import FormatStyle, LogLevel
from market_timers.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

PACKAGE_DIR = Path(__file__).resolve().parent.parent


class ConfigManager:
    """
    Main configuration manager with include system support

    Loads config.yaml and processes the include: directive to merge modular
    YAML files. Falls back to factory_defaults.yaml if the main config can't
    be read.

    Example:
        config = ConfigManager()
        config.load()

        config.timers.debounce_ms     # 2000
        config.logging.level          # LogLevel.INFO
    """

    def __init__(
        self,
        config_path: Union[str, Path] = "config/config.yaml",
        defaults_path: Union[str, Path] = "config/factory_defaults.yaml",
    ):
        """
        Args:
            config_path: Main config.yaml (relative paths not found in the
                working directory resolve against the package)
            defaults_path: Factory defaults fallback
        """
        self.config_path = self._resolve(config_path)
        self.factory_defaults_path = self._resolve(defaults_path)
        self.data: Dict[str, Any] = {}
        self.app_config: Optional[AppConfig] = None

    @staticmethod
    def _resolve(path: Union[str, Path]) -> Path:
        path = Path(path)
        if path.is_absolute() or path.exists():
            return path
        return PACKAGE_DIR / path

    def load(self) -> AppConfig:
        """
        Load YAML configuration

        Process:
        1. Load main config.yaml
        2. If it has 'include:' list, load and merge those files
        3. Otherwise treat it as a monolithic config
        4. Fall back to factory defaults on any read/parse failure
        5. Parse into typed config (validation errors are NOT masked)
        """
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                main_config = yaml.safe_load(f) or {}

            if "include" in main_config:
                log.info("Using include-based configuration")
                self.data = self._load_with_includes(main_config["include"], self.config_path.parent)
            else:
                log.info("Using monolithic configuration")
                self.data = main_config

        except (OSError, yaml.YAMLError) as ex:
            log.error("Failed to load config.yaml", error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")

            with open(self.factory_defaults_path, "r", encoding="utf-8") as f:
                self.data = yaml.safe_load(f) or {}

        self.app_config = self.parse(self.data)
        return self.app_config

    def _load_with_includes(self, include_list: List[str], config_dir: Path) -> Dict[str, Any]:
        """Load and merge the YAML files named in include: (later files win)."""
        merged: Dict[str, Any] = {}

        for filename in include_list:
            filepath = config_dir / filename
            try:
                with open(filepath, "r", encoding="utf-8") as f:
                    file_data = yaml.safe_load(f)
                    if file_data:
                        merged.update(file_data)
                        log.debug(f"Loaded {filename}", keys=str(list(file_data.keys())))
            except FileNotFoundError:
                log.error(f"File not found: {filename}")
                raise

        log.info("Config merge complete", total_keys=len(merged), keys=str(list(merged.keys())))
        return merged

    # ===== Parsing =====

    @classmethod
    def parse(cls, data: Dict[str, Any]) -> AppConfig:
        """
        Build typed config from a raw dict.

        Raises:
            ConfigError: invalid values
        """
        return AppConfig(
            timers=cls._parse_timers(data.get("timers") or {}),
            logging=cls._parse_logging(data.get("logging") or {}),
            api=cls._parse_api(data.get("api") or {}),
        )

    @staticmethod
    def _parse_timers(raw: Dict[str, Any]) -> TimerConfig:
        defaults = TimerConfig()
        try:
            tick = int(raw.get("tick_interval_ms", defaults.tick_interval_ms))
            debounce = int(raw.get("debounce_ms", defaults.debounce_ms))
            deposit_window = int(raw.get("deposit_window_ms", defaults.deposit_window_ms))
        except (TypeError, ValueError) as ex:
            raise ConfigError(f"timers: expected integer milliseconds ({ex})") from ex

        style_name = str(raw.get("format_style", defaults.format_style.name)).upper()
        if style_name not in FormatStyle.__members__:
            raise ConfigError(
                f"timers.format_style '{style_name}' is not one of {list(FormatStyle.__members__)}"
            )

        if tick <= 0:
            raise ConfigError(f"timers.tick_interval_ms must be positive, got {tick}")
        if debounce < 0:
            raise ConfigError(f"timers.debounce_ms must not be negative, got {debounce}")
        if deposit_window < 0:
            raise ConfigError(f"timers.deposit_window_ms must not be negative, got {deposit_window}")

        return TimerConfig(
            tick_interval_ms=tick,
            debounce_ms=debounce,
            deposit_window_ms=deposit_window,
            format_style=FormatStyle[style_name],
        )

    @staticmethod
    def _parse_logging(raw: Dict[str, Any]) -> LoggingConfig:
        level_name = str(raw.get("level", "INFO")).upper()
        if level_name == "WARNING":
            level_name = "WARN"
        if level_name not in LogLevel.__members__:
            raise ConfigError(f"logging.level '{level_name}' is not one of {list(LogLevel.__members__)}")
        return LoggingConfig(level=LogLevel[level_name], use_colors=bool(raw.get("use_colors", True)))

    @staticmethod
    def _parse_api(raw: Dict[str, Any]) -> ApiConfig:
        defaults = ApiConfig()
        try:
            port = int(raw.get("port", defaults.port))
        except (TypeError, ValueError) as ex:
            raise ConfigError(f"api.port must be an integer ({ex})") from ex
        return ApiConfig(
            host=str(raw.get("host", defaults.host)),
            port=port,
            cors_origins=list(raw.get("cors_origins") or []),
        )

    # ===== Accessors =====

    def _require_loaded(self) -> AppConfig:
        if self.app_config is None:
            raise ConfigError("ConfigManager.load() must be called first")
        return self.app_config

    @property
    def timers(self) -> TimerConfig:
        return self._require_loaded().timers

    @property
    def logging(self) -> LoggingConfig:
        return self._require_loaded().logging

    @property
    def api(self) -> ApiConfig:
        return self._require_loaded().api
