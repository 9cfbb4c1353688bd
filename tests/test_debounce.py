"""Tests for DebounceClassifier and EdgeMonitor."""

import threading
import time

import pytest

from coffeepixie.models import PressEvent
from coffeepixie.services.debounce import DebounceClassifier, EdgeMonitor

BUTTON = 24


def scripted_clock(*values):
    """Clock returning the given monotonic seconds in order."""
    it = iter(values)
    return lambda: next(it)


class TestDebounceClassifier:
    def test_below_threshold_is_bounce(self):
        assert DebounceClassifier(300).classify(BUTTON, 120.0) is None

    def test_at_threshold_is_press(self):
        press = DebounceClassifier(300).classify(BUTTON, 300.0)
        assert press == PressEvent(line_id=BUTTON, observed_duration_ms=300.0)

    def test_above_threshold_is_press(self):
        assert DebounceClassifier(300).classify(BUTTON, 4500.0) is not None

    def test_zero_threshold_confirms_everything(self):
        assert DebounceClassifier(0).classify(BUTTON, 0.0) is not None

    def test_negative_threshold_rejected(self):
        with pytest.raises(ValueError):
            DebounceClassifier(-1)


class TestEdgeMonitorRunOnce:
    def _monitor(self, gpio, clock, presses):
        gpio.setup_input(BUTTON)
        return EdgeMonitor(gpio, BUTTON, DebounceClassifier(300), presses.append,
                           name="arm-toggle", clock=clock, poll_timeout_s=0.05)

    def test_long_wait_confirms_press(self, gpio):
        presses = []
        monitor = self._monitor(gpio, scripted_clock(10.0, 10.5), presses)
        gpio.inject_edge(BUTTON)
        press = monitor.run_once()
        assert press is not None
        assert press.observed_duration_ms == pytest.approx(500.0)
        assert presses == [press]

    def test_short_wait_is_discarded(self, gpio):
        presses = []
        monitor = self._monitor(gpio, scripted_clock(10.0, 10.05), presses)
        gpio.inject_edge(BUTTON)
        assert monitor.run_once() is None
        assert presses == []

    def test_line_read_before_and_after_wait(self, gpio):
        monitor = self._monitor(gpio, scripted_clock(0.0, 1.0), [])
        gpio.inject_edge(BUTTON)
        monitor.run_once()
        assert gpio.reads[BUTTON] == 2

    def test_waits_across_poll_timeouts(self, gpio):
        presses = []
        monitor = self._monitor(gpio, scripted_clock(0.0, 2.0), presses)
        threading.Timer(0.2, gpio.inject_edge, args=(BUTTON,)).start()
        assert monitor.run_once() is not None
        assert len(presses) == 1

    def test_handler_errors_do_not_escape(self, gpio):
        def broken(press):
            raise RuntimeError("boom")

        gpio.setup_input(BUTTON)
        monitor = EdgeMonitor(gpio, BUTTON, DebounceClassifier(0), broken,
                              clock=scripted_clock(0.0, 1.0), poll_timeout_s=0.05)
        gpio.inject_edge(BUTTON)
        assert monitor.run_once() is not None


class TestEdgeMonitorThread:
    def test_injected_edges_reach_handler(self, gpio):
        pressed = threading.Event()
        gpio.setup_input(BUTTON)
        monitor = EdgeMonitor(gpio, BUTTON, DebounceClassifier(0), lambda press: pressed.set(),
                              poll_timeout_s=0.05)
        monitor.start()
        try:
            assert monitor.running
            gpio.inject_edge(BUTTON)
            assert pressed.wait(1)
        finally:
            monitor.stop()
        assert not monitor.running

    def test_bounce_does_not_reach_handler(self, gpio):
        presses = []
        gpio.setup_input(BUTTON)
        monitor = EdgeMonitor(gpio, BUTTON, DebounceClassifier(10_000), presses.append,
                              poll_timeout_s=0.05)
        monitor.start()
        try:
            gpio.inject_edge(BUTTON)
            time.sleep(0.2)
        finally:
            monitor.stop()
        assert presses == []

    def test_stop_keeps_thread_while_handler_is_busy(self, gpio):
        entered = threading.Event()
        release = threading.Event()

        def slow_handler(press):
            entered.set()
            release.wait(2)

        gpio.setup_input(BUTTON)
        monitor = EdgeMonitor(gpio, BUTTON, DebounceClassifier(0), slow_handler,
                              poll_timeout_s=0.05)
        monitor.start()
        try:
            gpio.inject_edge(BUTTON)
            assert entered.wait(1)
            monitor.stop(timeout=0.05)
            assert monitor.running
        finally:
            release.set()
            monitor.stop(timeout=2)
        assert not monitor.running
