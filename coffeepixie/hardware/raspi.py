"""Raspberry Pi line backend built on RPi.GPIO"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class RaspberryPiGPIO:
    """LineDriver for real hardware.

    Inputs are configured with an internal pull-down resistor, so a button
    wired to 3V3 produces a rising edge when pressed.
    """

    def __init__(self):
        # Only importable on a Pi
        import RPi.GPIO as GPIO
        self._gpio = GPIO
        self._gpio.setmode(GPIO.BCM)
        self._gpio.setwarnings(False)
        logger.info("✓ GPIO initialized in BCM mode (REAL HARDWARE)")

    def setup_input(self, line_id: int):
        try:
            self._gpio.setup(line_id, self._gpio.IN, pull_up_down=self._gpio.PUD_DOWN)
        except RuntimeError as e:
            logger.error(f"Failed to set up GPIO {line_id} as input: {e}")
            raise
        logger.info(f"GPIO {line_id}: input, pull-down, rising edge")

    def setup_output(self, line_id: int, initial: bool = False):
        try:
            self._gpio.setup(
                line_id,
                self._gpio.OUT,
                initial=self._gpio.HIGH if initial else self._gpio.LOW,
            )
        except RuntimeError as e:
            logger.error(f"Failed to set up GPIO {line_id} as output: {e}")
            raise
        logger.info(f"GPIO {line_id}: output, initial {'HIGH' if initial else 'LOW'}")

    def set_level(self, line_id: int, high: bool):
        self._gpio.output(line_id, self._gpio.HIGH if high else self._gpio.LOW)

    def read_level(self, line_id: int) -> bool:
        return self._gpio.input(line_id) == self._gpio.HIGH

    def wait_for_rising_edge(self, line_id: int, timeout_s: Optional[float] = None) -> bool:
        timeout_ms = None if timeout_s is None else int(timeout_s * 1000)
        if timeout_ms is None:
            channel = self._gpio.wait_for_edge(line_id, self._gpio.RISING)
        else:
            channel = self._gpio.wait_for_edge(line_id, self._gpio.RISING, timeout=timeout_ms)
        return channel is not None

    def cleanup(self):
        try:
            self._gpio.cleanup()
            logger.info("GPIO cleanup complete")
        except RuntimeError as e:
            logger.error(f"Error during GPIO cleanup: {e}")
