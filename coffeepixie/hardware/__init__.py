"""Hardware backends and drivers"""

from .interfaces import LineDriver, StatusIndicator
from .simulated import SimulatedGPIO
from .status_leds import StatusLeds

__all__ = ['LineDriver', 'StatusIndicator', 'SimulatedGPIO', 'StatusLeds', 'create_line_driver']


def create_line_driver(simulate: bool) -> LineDriver:
    """Real RPi.GPIO backend, or the simulated one when ``simulate`` is set"""
    if simulate:
        return SimulatedGPIO()
    from .raspi import RaspberryPiGPIO
    return RaspberryPiGPIO()
