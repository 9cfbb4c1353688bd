"""Nespresso machine driver.

The machine's espresso and lungo buttons are bridged by relays. The relays
are active-LOW: driving the pin low closes the relay (button held), high
opens it.
"""

import logging
import time
from typing import Callable, Dict, Optional

from ..hardware.interfaces import LineDriver

logger = logging.getLogger(__name__)


class NespressoMachine:
    """Presses the machine's buttons through relays"""

    def __init__(self, driver: LineDriver, espresso_line: Optional[int], lungo_line: Optional[int],
                 press_ms: int = 300):
        self.driver = driver
        self.espresso_line = espresso_line
        self.lungo_line = lungo_line
        self.press_ms = press_ms
        for line in (espresso_line, lungo_line):
            if line is not None:
                driver.setup_output(line, initial=True)

    def make_espresso(self):
        self._press("Espresso", self.espresso_line)

    def make_lungo(self):
        self._press("Lungo", self.lungo_line)

    def actions(self) -> Dict[str, Callable[[], None]]:
        """Trigger actions by trigger type name"""
        return {"espresso": self.make_espresso, "lungo": self.make_lungo}

    def _press(self, name: str, line: Optional[int]):
        if line is None:
            logger.warning(f"{name} button not configured for use, skipping press")
            return

        logger.info(f"Pressing {name} button")
        self._set(line, False)
        time.sleep(self.press_ms / 1000.0)
        logger.info(f"Releasing {name} button")
        self._set(line, True)

    def _set(self, line: int, high: bool):
        try:
            self.driver.set_level(line, high)
        except (RuntimeError, OSError) as e:
            logger.error(f"Error setting GPIO {line} to {'High' if high else 'Low'}: {e}")

    def disconnect(self):
        """Open both relays"""
        for line in (self.espresso_line, self.lungo_line):
            if line is not None:
                logger.info(f"Setting GPIO {line} to High (which turns the Relay into Open status)")
                self._set(line, True)
