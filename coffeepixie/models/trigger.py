"""Trigger time, arm state and press event models"""

from dataclasses import dataclass
from enum import Enum


class ArmState(Enum):
    """Whether a coffee is scheduled"""
    DISARMED = "disarmed"
    ARMED = "armed"


@dataclass(frozen=True)
class TriggerTime:
    """Time of day at which the bound action fires (host local time)"""
    hour: int
    minute: int
    second: int = 0

    def __post_init__(self):
        if not 0 <= self.hour <= 23:
            raise ValueError(f"hour out of range: {self.hour}")
        if not 0 <= self.minute <= 59:
            raise ValueError(f"minute out of range: {self.minute}")
        if not 0 <= self.second <= 59:
            raise ValueError(f"second out of range: {self.second}")

    @classmethod
    def parse(cls, text: str) -> "TriggerTime":
        """Parse "H:MM", "HH:MM" or "HH:MM:SS".

        Raises:
            ValueError: wrong field count, non-numeric or out-of-range field
        """
        fields = str(text).strip().split(":")
        if len(fields) not in (2, 3):
            raise ValueError(f"expected 'hh:mm' or 'hh:mm:ss', got {text!r}")
        # int() would also take "0_7" and non-ASCII digits
        if not all(f.lstrip("-").isascii() and f.lstrip("-").isdigit() for f in fields):
            raise ValueError(f"non-numeric field in {text!r}")
        return cls(*[int(f) for f in fields])

    def label(self) -> str:
        """Render as "HH:MM" """
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass
class PressEvent:
    """A button edge that survived debouncing"""
    line_id: int
    observed_duration_ms: float
