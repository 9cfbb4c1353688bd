"""Armed / disarmed status LEDs"""

import logging
import time
from typing import Optional

from .interfaces import LineDriver

logger = logging.getLogger(__name__)


class StatusLeds:
    """StatusIndicator that pulses one of two LEDs.

    ``None`` for a line means the LED is not connected; pulses for it are
    logged and skipped.
    """

    def __init__(self, driver: LineDriver, armed_line: Optional[int], disarmed_line: Optional[int]):
        self.driver = driver
        self.armed_line = armed_line
        self.disarmed_line = disarmed_line
        for line in (armed_line, disarmed_line):
            if line is not None:
                driver.setup_output(line, initial=False)

    def activate_armed_status(self, is_armed: bool, hold_ms: int, schedule_label: str):
        if is_armed:
            line = self.armed_line
            logger.info(f"CoffeeTimer Status: ARMED for {schedule_label}")
        else:
            line = self.disarmed_line
            logger.info("CoffeeTimer Status: disarmed")

        if line is None:
            logger.info(f"LED for status is_armed={is_armed} is not configured for use, skipping activation")
            return

        self._set(line, True)
        time.sleep(hold_ms / 1000.0)
        self._set(line, False)

    def off(self):
        """Turn both LEDs off"""
        for line in (self.armed_line, self.disarmed_line):
            if line is not None:
                logger.info(f"Setting GPIO {line} to Low")
                self._set(line, False)

    def _set(self, line: int, high: bool):
        try:
            self.driver.set_level(line, high)
        except (RuntimeError, OSError) as e:
            logger.error(f"Error setting GPIO {line} to {'High' if high else 'Low'}: {e}")
