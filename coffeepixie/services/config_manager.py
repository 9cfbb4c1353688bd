"""
Configuration Manager for Coffee Pixie.
Loads pin, machine and timer settings from a JSON file, creating it with
defaults on first start, and persists trigger-time changes.
"""

import json
import logging
import threading
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Config file exists but can't be read or parsed"""


def pin_or_none(pin: int) -> Optional[int]:
    """Negative pin numbers mean "not connected" """
    return None if pin is None or pin < 0 else pin


@dataclass
class RaspiConfig:
    """GPIO pin assignments (BCM numbering, -1 = not connected)"""
    espresso_button_pin: int = 27
    lungo_button_pin: int = 22
    armed_led_pin: int = 17
    disarmed_led_pin: int = 4
    arm_button_pin: int = 24
    check_status_button_pin: int = 23
    button_press_detecting_duration_ms: int = 300


@dataclass
class NespressoMachineConfig:
    button_press_duration_ms: int = 300


@dataclass
class TimerConfig:
    trigger_time: str = "8:30"


@dataclass
class PixieConfig:
    raspberry_pi: RaspiConfig = field(default_factory=RaspiConfig)
    nespresso_machine: NespressoMachineConfig = field(default_factory=NespressoMachineConfig)
    timer: TimerConfig = field(default_factory=TimerConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PixieConfig":
        """Build from parsed JSON; missing keys fall back to defaults"""
        return cls(
            raspberry_pi=_section(RaspiConfig, data.get("raspberry_pi")),
            nespresso_machine=_section(NespressoMachineConfig, data.get("nespresso_machine")),
            timer=_section(TimerConfig, data.get("timer")),
        )

    def to_dict(self):
        """Convert to dictionary"""
        return asdict(self)


def _section(cls, data: Optional[Dict[str, Any]]):
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected an object for {cls.__name__}, got {type(data).__name__}")
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        logger.warning(f"Ignoring unknown {cls.__name__} keys: {sorted(unknown)}")
    return cls(**{k: v for k, v in data.items() if k in known})


class ConfigManager:
    """Reads and writes the JSON config file"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.settings = PixieConfig()
        self._lock = threading.RLock()

    def load(self) -> PixieConfig:
        """Load the config file, writing defaults first if it doesn't exist"""
        if not self.path.exists():
            logger.info(f"No config at {self.path}, writing defaults")
            self.settings = PixieConfig()
            self.save()
            return self.settings

        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not read config {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config {self.path} must contain a JSON object")

        self.settings = PixieConfig.from_dict(data)
        logger.info(f"Loaded config from {self.path}")
        return self.settings

    def save(self):
        with self._lock:
            try:
                if self.path.parent and not self.path.parent.exists():
                    self.path.parent.mkdir(parents=True, exist_ok=True)
                with open(self.path, "w") as f:
                    json.dump(self.settings.to_dict(), f, indent=2)
            except OSError as e:
                raise ConfigError(f"Could not write config {self.path}: {e}") from e
        logger.debug(f"Saved config to {self.path}")

    def update_trigger_time(self, trigger_time: str):
        """Persist a trigger time the coffee timer has accepted"""
        with self._lock:
            self.settings.timer.trigger_time = trigger_time
            self.save()
        logger.info(f"Trigger time {trigger_time} saved to {self.path}")
