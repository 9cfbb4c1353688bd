"""Tests for ConfigManager JSON loading and persistence."""

import json
import threading

import pytest

from coffeepixie.services.config_manager import (
    ConfigError,
    ConfigManager,
    PixieConfig,
    pin_or_none,
)


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config.json"


def test_missing_file_is_created_with_defaults(config_path):
    settings = ConfigManager(config_path).load()
    assert config_path.exists()
    assert settings == PixieConfig()
    on_disk = json.loads(config_path.read_text())
    assert on_disk["timer"]["trigger_time"] == "8:30"
    assert on_disk["raspberry_pi"]["arm_button_pin"] == 24


def test_saved_trigger_time_is_read_back(config_path):
    ConfigManager(config_path).load()
    ConfigManager(config_path).update_trigger_time("06:45")
    assert ConfigManager(config_path).load().timer.trigger_time == "06:45"


def test_partial_file_falls_back_to_defaults(config_path):
    config_path.write_text(json.dumps({"raspberry_pi": {"arm_button_pin": -1}}))
    settings = ConfigManager(config_path).load()
    assert settings.raspberry_pi.arm_button_pin == -1
    assert settings.raspberry_pi.check_status_button_pin == 23
    assert settings.nespresso_machine.button_press_duration_ms == 300


def test_unknown_keys_are_ignored(config_path):
    config_path.write_text(json.dumps({"timer": {"trigger_time": "7:00", "colour": "blue"}}))
    assert ConfigManager(config_path).load().timer.trigger_time == "7:00"


def test_invalid_json_raises(config_path):
    config_path.write_text("{not json")
    with pytest.raises(ConfigError):
        ConfigManager(config_path).load()


def test_non_object_section_raises(config_path):
    config_path.write_text(json.dumps({"timer": "8:30"}))
    with pytest.raises(ConfigError):
        ConfigManager(config_path).load()


@pytest.mark.parametrize("pin,expected", [(-1, None), (0, 0), (17, 17)])
def test_pin_or_none(pin, expected):
    assert pin_or_none(pin) == expected


def test_concurrent_trigger_time_updates_leave_valid_file(config_path):
    manager = ConfigManager(config_path)
    manager.load()
    times = [f"{hour:02d}:15" for hour in range(6, 14)]
    threads = [threading.Thread(target=manager.update_trigger_time, args=(t,)) for t in times]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(2)

    on_disk = json.loads(config_path.read_text())
    assert on_disk["timer"]["trigger_time"] in times
    assert on_disk["timer"]["trigger_time"] == manager.settings.timer.trigger_time
