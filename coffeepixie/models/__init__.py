"""Models package"""

from .trigger import ArmState, TriggerTime, PressEvent

__all__ = ['ArmState', 'TriggerTime', 'PressEvent']
