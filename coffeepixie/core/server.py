"""Core PixieServer - wires hardware, coffee timer, buttons and web form"""

import asyncio
import logging
from typing import List, Optional

from ..hardware import LineDriver, StatusLeds, create_line_driver
from ..services import (
    CoffeeTimer,
    ConfigManager,
    DebounceClassifier,
    EdgeMonitor,
    NespressoMachine,
    WebServer,
)
from ..services.config_manager import pin_or_none
from .. import config

logger = logging.getLogger(__name__)


class PixieServer:
    """Main Coffee Pixie server orchestrating all components"""
    
    def __init__(self, config_path: Optional[str] = None, driver: Optional[LineDriver] = None,
                 web_port: Optional[int] = None):
        logger.info("***** Starting up coffee pixie *****")
        
        # Load settings (writes defaults on first start)
        self.config_manager = ConfigManager(config_path or config.CONFIG_FILE)
        self.settings = self.config_manager.load()
        rp = self.settings.raspberry_pi
        
        # Hardware
        self.driver = driver or create_line_driver(config.SIMULATE_HARDWARE)
        self.status_leds = StatusLeds(
            self.driver,
            armed_line=pin_or_none(rp.armed_led_pin),
            disarmed_line=pin_or_none(rp.disarmed_led_pin),
        )
        self.machine = NespressoMachine(
            self.driver,
            espresso_line=pin_or_none(rp.espresso_button_pin),
            lungo_line=pin_or_none(rp.lungo_button_pin),
            press_ms=self.settings.nespresso_machine.button_press_duration_ms,
        )
        
        # Timer
        self.coffee_timer = CoffeeTimer(
            status_indicator=self.status_leds,
            show_status_ms=config.SHOW_STATUS_MS,
            rearm_on_change=config.REARM_ON_CHANGE,
        )
        self.coffee_timer.set_trigger_time(self.settings.timer.trigger_time)
        self.coffee_timer.set_action(self.machine.make_espresso)
        
        # Buttons (one monitor thread per connected button)
        self.monitors: List[EdgeMonitor] = []
        classifier = DebounceClassifier(rp.button_press_detecting_duration_ms)
        self._add_monitor("check-status", rp.check_status_button_pin, classifier,
                          lambda press: self.coffee_timer.show_armed_status())
        self._add_monitor("arm-toggle", rp.arm_button_pin, classifier,
                          lambda press: self.coffee_timer.toggle())
        
        # Web form
        self.web = WebServer(
            self.coffee_timer,
            self.machine.actions(),
            config_manager=self.config_manager,
            port=config.WEB_PORT if web_port is None else web_port,
        )
        
        self.running = False
        self._stopped = False
        logger.info("PixieServer initialized successfully")
    
    def _add_monitor(self, name, pin, classifier, handler):
        line = pin_or_none(pin)
        if line is None:
            logger.info(f"{name} button GPIO not configured for use")
            return
        self.driver.setup_input(line)
        self.monitors.append(EdgeMonitor(self.driver, line, classifier, handler, name=name))
    
    async def start(self):
        """Arm the timer, start buttons and web form, then idle until stopped"""
        try:
            logger.info("Starting Coffee Pixie...")
            
            self.coffee_timer.arm()
            await asyncio.to_thread(self.coffee_timer.show_armed_status)
            
            for monitor in self.monitors:
                monitor.start()
            
            self.web.start()
            
            self.running = True
            logger.info("Coffee Pixie started successfully")
            
            # Keep running
            while self.running:
                await asyncio.sleep(1)
                
        except Exception as e:
            logger.error(f"Error starting Coffee Pixie: {e}", exc_info=True)
            raise
    
    async def stop(self):
        """Stop server and release hardware"""
        if self._stopped:
            return
        self._stopped = True
        logger.info("Stopping Coffee Pixie...")
        
        self.running = False
        
        self.coffee_timer.disarm()
        for monitor in self.monitors:
            monitor.stop()
        self.web.stop()
        
        # Relays open, LEDs off
        self.machine.disconnect()
        self.status_leds.off()
        self.driver.cleanup()
        
        logger.info("Coffee Pixie stopped")
