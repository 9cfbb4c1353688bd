"""Daily trigger computation and cancellable one-shot timers.

Scheduling works on host local time. Daylight saving transitions are not
handled specially: the next fire is simply the same wall-clock time on the
following calendar day.
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..models import TriggerTime

logger = logging.getLogger(__name__)


def compute_next_fire_instant(trigger_time: TriggerTime, now: datetime) -> datetime:
    """Next occurrence of ``trigger_time`` strictly after ``now``.

    Today's occurrence if it is still ahead, otherwise tomorrow's.
    """
    candidate = now.replace(
        hour=trigger_time.hour,
        minute=trigger_time.minute,
        second=trigger_time.second,
        microsecond=0,
    )
    if candidate <= now:
        candidate = candidate + timedelta(days=1)
    return candidate


class PendingTimer:
    """Handle to one delayed, cancellable invocation of an action.

    Cancel is at-most-once-effective: once the action has started, cancel
    is a no-op and the action runs to completion.
    """

    def __init__(self, fire_at: datetime, delay_s: float, action: Callable[[], None],
                 fire_lock: threading.Lock):
        self.fire_at = fire_at
        self._action = action
        self._fire_lock = fire_lock
        self._state_lock = threading.Lock()
        self._fired = False
        self._cancelled = False
        self._timer = threading.Timer(delay_s, self.fire)
        self._timer.daemon = True

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self):
        self._timer.start()

    def fire(self):
        """Run the action now unless the timer was cancelled or already fired"""
        with self._state_lock:
            if self._cancelled or self._fired:
                return
            self._fired = True

        # Actions of one scheduler never run concurrently with each other
        with self._fire_lock:
            try:
                self._action()
            except Exception as e:
                logger.error(f"Scheduled action for {self.fire_at} failed: {e}", exc_info=True)

    def cancel(self) -> bool:
        """Cancel the pending invocation. Returns True if this call prevented it."""
        with self._state_lock:
            if self._fired or self._cancelled:
                return False
            self._cancelled = True
        self._timer.cancel()
        logger.debug(f"Cancelled timer for {self.fire_at}")
        return True


class ScheduledTrigger:
    """Creates PendingTimers against a clock (local time by default)"""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or datetime.now
        self._fire_lock = threading.Lock()

    def next_fire_instant(self, trigger_time: TriggerTime) -> datetime:
        return compute_next_fire_instant(trigger_time, self.clock())

    def schedule(self, instant: datetime, action: Callable[[], None]) -> PendingTimer:
        """Run ``action`` once at ``instant``; past instants fire immediately"""
        delay_s = max(0.0, (instant - self.clock()).total_seconds())
        pending = PendingTimer(instant, delay_s, action, self._fire_lock)
        pending.start()
        return pending
