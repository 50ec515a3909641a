import pytest

from market_timers.errors import ConfigError
from market_timers.managers import ConfigManager
from market_timers.models import FormatStyle, LogLevel


def write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


def test_bundled_config_loads():
    config = ConfigManager()
    config.load()

    assert config.timers.tick_interval_ms == 1000
    assert config.timers.debounce_ms == 2000
    assert config.timers.deposit_window_ms == 259_200_000
    assert config.timers.format_style is FormatStyle.FULL
    assert config.logging.level is LogLevel.INFO
    assert config.api.port == 8000


def test_include_files_are_merged(tmp_path):
    write(tmp_path / "timers.yaml", "timers:\n  debounce_ms: 500\n  format_style: compact\n")
    write(tmp_path / "logging.yaml", "logging:\n  level: debug\n  use_colors: false\n")
    main = write(tmp_path / "config.yaml", "include:\n  - timers.yaml\n  - logging.yaml\n")

    app_config = ConfigManager(config_path=main).load()

    assert app_config.timers.debounce_ms == 500
    assert app_config.timers.tick_interval_ms == 1000
    assert app_config.timers.format_style is FormatStyle.COMPACT
    assert app_config.logging.level is LogLevel.DEBUG
    assert app_config.logging.use_colors is False


def test_monolithic_config(tmp_path):
    main = write(tmp_path / "config.yaml", "api:\n  host: 127.0.0.1\n  port: 9000\n")

    app_config = ConfigManager(config_path=main).load()

    assert app_config.api.host == "127.0.0.1"
    assert app_config.api.port == 9000


def test_missing_config_falls_back_to_factory_defaults(tmp_path):
    config = ConfigManager(config_path=tmp_path / "missing.yaml")
    app_config = config.load()

    assert app_config.api.host == "127.0.0.1"
    assert app_config.timers.debounce_ms == 2000


def test_broken_yaml_falls_back_to_factory_defaults(tmp_path):
    main = write(tmp_path / "config.yaml", "timers: [unclosed\n")

    app_config = ConfigManager(config_path=main).load()

    assert app_config.timers.tick_interval_ms == 1000


@pytest.mark.parametrize("timers_yaml", [
    "timers:\n  tick_interval_ms: 0\n",
    "timers:\n  debounce_ms: -1\n",
    "timers:\n  debounce_ms: soon\n",
    "timers:\n  format_style: WIDE\n",
])
def test_invalid_timer_values_raise(tmp_path, timers_yaml):
    main = write(tmp_path / "config.yaml", timers_yaml)

    with pytest.raises(ConfigError):
        ConfigManager(config_path=main).load()


def test_invalid_log_level_raises():
    with pytest.raises(ConfigError):
        ConfigManager.parse({"logging": {"level": "LOUD"}})


def test_warning_is_accepted_as_warn():
    assert ConfigManager.parse({"logging": {"level": "warning"}}).logging.level is LogLevel.WARN


def test_accessors_require_load():
    with pytest.raises(ConfigError):
        ConfigManager().timers
