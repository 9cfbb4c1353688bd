"""Capability interfaces for the hardware the coffee timer talks to.

The core only depends on these protocols; ``raspi.RaspberryPiGPIO`` and
``simulated.SimulatedGPIO`` are the two line backends.
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class LineDriver(Protocol):
    """Reads and drives named GPIO lines (BCM numbers)."""

    def setup_input(self, line_id: int) -> None: ...

    def setup_output(self, line_id: int, initial: bool = False) -> None: ...

    def set_level(self, line_id: int, high: bool) -> None: ...

    def read_level(self, line_id: int) -> bool: ...

    def wait_for_rising_edge(self, line_id: int, timeout_s: Optional[float] = None) -> bool:
        """Block until a rising edge on the line.

        Returns False when ``timeout_s`` expired without an edge.
        """
        ...

    def cleanup(self) -> None: ...


@runtime_checkable
class StatusIndicator(Protocol):
    """Shows armed/disarmed state as a timed pulse on one of two LEDs."""

    def activate_armed_status(self, is_armed: bool, hold_ms: int, schedule_label: str) -> None: ...
