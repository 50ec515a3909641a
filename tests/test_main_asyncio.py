import json

import pytest

from market_timers.errors import ConfigError
from market_timers.main_asyncio import load_record_file, parse_args
from market_timers.models import LifecyclePhase


def test_parse_args_defaults():
    args = parse_args([])

    assert args.config == "config/config.yaml"
    assert args.record is None
    assert args.port is None


def test_parse_args_overrides(tmp_path):
    args = parse_args(["--record", str(tmp_path / "r.yaml"), "--port", "9001", "--host", "127.0.0.1"])

    assert args.record == tmp_path / "r.yaml"
    assert args.port == 9001


def test_load_yaml_record(tmp_path):
    path = tmp_path / "record.yaml"
    path.write_text(
        "state: ACTIVE\nlaunchPeriod: 100\nnexRaffleTime: 200\nnextIntervalDepositTime: 300\n",
        encoding="utf-8",
    )

    record = load_record_file(path)

    assert record.phase is LifecyclePhase.ACTIVE
    assert record.raffle_deadline_sec == 200


def test_load_json_record(tmp_path):
    path = tmp_path / "record.json"
    path.write_text(json.dumps({
        "phase": 0,
        "launch_deadline_sec": 100,
        "raffle_deadline_sec": 200,
        "deposit_window_start_sec": 300,
    }), encoding="utf-8")

    assert load_record_file(path).phase is LifecyclePhase.LAUNCH


@pytest.mark.parametrize("content", ["- just\n- a list\n", "state: 0\n"])
def test_bad_record_file_raises(tmp_path, content):
    path = tmp_path / "record.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_record_file(path)


def test_missing_record_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        load_record_file(tmp_path / "nope.yaml")
