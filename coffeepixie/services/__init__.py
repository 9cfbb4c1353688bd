"""Services package"""

from .scheduler import ScheduledTrigger, PendingTimer, compute_next_fire_instant
from .coffee_timer import CoffeeTimer, BoundAction
from .debounce import DebounceClassifier, EdgeMonitor
from .nespresso_machine import NespressoMachine
from .config_manager import ConfigManager, ConfigError, PixieConfig
from .web_server import WebServer

__all__ = [
    'ScheduledTrigger', 'PendingTimer', 'compute_next_fire_instant',
    'CoffeeTimer', 'BoundAction',
    'DebounceClassifier', 'EdgeMonitor',
    'NespressoMachine',
    'ConfigManager', 'ConfigError', 'PixieConfig',
    'WebServer',
]
