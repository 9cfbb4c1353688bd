"""Shared fixtures: simulated hardware and manual scheduling."""

import threading
from datetime import datetime

import pytest

from coffeepixie.hardware import SimulatedGPIO
from coffeepixie.services.scheduler import PendingTimer, ScheduledTrigger


class RecordingStatusIndicator:
    """StatusIndicator that records calls instead of pulsing LEDs."""

    def __init__(self):
        self.calls = []

    def activate_armed_status(self, is_armed, hold_ms, schedule_label):
        self.calls.append((is_armed, hold_ms, schedule_label))


class ManualScheduler(ScheduledTrigger):
    """Scheduler on a fixed clock whose timers only fire when told to."""

    def __init__(self, now: datetime):
        super().__init__(clock=lambda: self.now)
        self.now = now
        self.scheduled = []

    def schedule(self, instant, action):
        pending = PendingTimer(instant, 3600.0, action, threading.Lock())
        self.scheduled.append(pending)
        return pending

    @property
    def latest(self) -> PendingTimer:
        return self.scheduled[-1]


@pytest.fixture
def gpio():
    return SimulatedGPIO()


@pytest.fixture
def indicator():
    return RecordingStatusIndicator()


@pytest.fixture
def manual_scheduler():
    return ManualScheduler(datetime(2024, 3, 10, 6, 0, 0))
