"""Coffee timer - arm/disarm state machine for the daily coffee trigger

States: DISARMED (initial) and ARMED. Arming computes the next occurrence
of the trigger time and installs exactly one PendingTimer; when it fires,
the bound action runs and the timer disarms itself. Every transition holds
one lock for its full duration.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from ..hardware.interfaces import StatusIndicator
from ..models import ArmState, TriggerTime
from .scheduler import PendingTimer, ScheduledTrigger

logger = logging.getLogger(__name__)

DEFAULT_TRIGGER_TIME = TriggerTime(8, 30)


def _no_action():
    pass


class BoundAction:
    """Action wrapper that always disarms its owner after firing.

    The owner is disarmed even if the callback raises.
    """

    def __init__(self, callback: Callable[[], None], owner):
        self.callback = callback
        self.owner = owner

    def fire(self):
        logger.info("☕ TRIGGERING!")
        try:
            self.callback()
        except Exception as e:
            logger.error(f"Trigger action {getattr(self.callback, '__name__', self.callback)} failed: {e}",
                         exc_info=True)
        finally:
            self.owner.disarm()


class CoffeeTimer:
    """Arm state machine owning the pending timer and the arm state"""

    def __init__(
        self,
        trigger_time: TriggerTime = DEFAULT_TRIGGER_TIME,
        status_indicator: Optional[StatusIndicator] = None,
        scheduler: Optional[ScheduledTrigger] = None,
        show_status_ms: int = 2000,
        rearm_on_change: bool = True,
    ):
        self._lock = threading.RLock()
        self._state = ArmState.DISARMED
        self._trigger_time = trigger_time
        self._pending: Optional[PendingTimer] = None
        self._action = BoundAction(_no_action, self)
        self._scheduler = scheduler or ScheduledTrigger()
        self._status_indicator = status_indicator
        self.show_status_ms = show_status_ms
        self.rearm_on_change = rearm_on_change

    # ──────────────────────────────────────────────────────────────────
    # TRANSITIONS
    # ──────────────────────────────────────────────────────────────────

    def arm(self):
        """Schedule the next occurrence, replacing any pending one"""
        with self._lock:
            self._arm_locked()

    def disarm(self):
        with self._lock:
            self._disarm_locked()

    def toggle(self):
        """Button handler: flip the arm state, then show the new state"""
        with self._lock:
            if self._state is ArmState.ARMED:
                self._disarm_locked()
            else:
                self._arm_locked()
        self.show_armed_status()

    def _arm_locked(self):
        if self._pending is not None:
            # a timer is already going - stop it and create a new one below
            self._disarm_locked()

        fire_at = self._scheduler.next_fire_instant(self._trigger_time)
        self._pending = self._scheduler.schedule(fire_at, self._action.fire)
        self._state = ArmState.ARMED
        logger.info(f"CoffeeTimer triggering at {fire_at}")

    def _disarm_locked(self):
        if self._pending is not None:
            self._pending.cancel()
        self._pending = None
        if self._state is ArmState.ARMED:
            logger.info("CoffeeTimer disarmed")
        self._state = ArmState.DISARMED

    def _rearm_if_armed_locked(self):
        if self._state is ArmState.ARMED and self.rearm_on_change:
            self._disarm_locked()
            self._arm_locked()

    # ──────────────────────────────────────────────────────────────────
    # CONFIGURATION
    # ──────────────────────────────────────────────────────────────────

    def set_trigger_time(self, text: str) -> bool:
        """Set the trigger time from "H:MM", "HH:MM" or "HH:MM:SS".

        Malformed input is logged and rejected, leaving the current time
        in place. Returns whether the new time was accepted.
        """
        try:
            new_time = TriggerTime.parse(text)
        except ValueError as e:
            logger.warning(f"Unexpected trigger time format '{text}', expected 'hh:mm' ({e})")
            logger.warning(f"Leaving trigger time unchanged at {self.get_trigger_time()}")
            return False

        with self._lock:
            logger.info(f"Setting trigger time to {new_time.label()}")
            self._trigger_time = new_time
            self._rearm_if_armed_locked()
        return True

    def get_trigger_time(self) -> str:
        with self._lock:
            return self._trigger_time.label()

    @property
    def trigger_time(self) -> TriggerTime:
        with self._lock:
            return self._trigger_time

    def set_action(self, callback: Callable[[], None]):
        """Bind the action to run at trigger time"""
        with self._lock:
            self._action = BoundAction(callback, self)
            self._rearm_if_armed_locked()

    # ──────────────────────────────────────────────────────────────────
    # STATUS
    # ──────────────────────────────────────────────────────────────────

    def is_armed(self) -> bool:
        with self._lock:
            return self._state is ArmState.ARMED

    @property
    def state(self) -> ArmState:
        with self._lock:
            return self._state

    @property
    def next_fire_instant(self) -> Optional[datetime]:
        with self._lock:
            return self._pending.fire_at if self._pending is not None else None

    def show_armed_status(self):
        """Pulse the status LED for the current state (blocks for show_status_ms)"""
        with self._lock:
            is_armed = self._state is ArmState.ARMED
            label = self._trigger_time.label()
        if self._status_indicator is None:
            logger.info(f"CoffeeTimer Status: {'ARMED for ' + label if is_armed else 'disarmed'}")
            return
        self._status_indicator.activate_armed_status(is_armed, self.show_status_ms, label)
