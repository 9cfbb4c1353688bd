"""Button debouncing.

Each monitored button gets its own EdgeMonitor thread that blocks on the
hardware's rising-edge wait. The time spent waiting is the press signal:
electrical noise on the line produces edges in quick succession, so an edge
that arrives sooner than ``threshold_ms`` after the wait started is dropped
as bounce.
"""

import logging
import threading
import time
from typing import Callable, Optional

from ..hardware.interfaces import LineDriver
from ..models import PressEvent

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD_MS = 300


class DebounceClassifier:
    """Minimum-hold-duration policy. A threshold of 0 confirms every edge."""

    def __init__(self, threshold_ms: float = DEFAULT_THRESHOLD_MS):
        if threshold_ms < 0:
            raise ValueError(f"threshold_ms must be >= 0, got {threshold_ms}")
        self.threshold_ms = threshold_ms

    def classify(self, line_id: int, elapsed_ms: float) -> Optional[PressEvent]:
        if elapsed_ms >= self.threshold_ms:
            return PressEvent(line_id=line_id, observed_duration_ms=elapsed_ms)
        logger.debug(f"GPIO {line_id}: edge after {elapsed_ms:.0f}ms discarded as bounce")
        return None


class EdgeMonitor:
    """Wait-for-edge loop for one input line"""

    def __init__(
        self,
        driver: LineDriver,
        line_id: int,
        classifier: DebounceClassifier,
        handler: Callable[[PressEvent], None],
        name: Optional[str] = None,
        clock: Callable[[], float] = time.monotonic,
        poll_timeout_s: float = 0.5,
    ):
        self.driver = driver
        self.line_id = line_id
        self.classifier = classifier
        self.handler = handler
        self.name = name or f"gpio-{line_id}"
        self.clock = clock
        self.poll_timeout_s = poll_timeout_s
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def run_once(self) -> Optional[PressEvent]:
        """Wait for one edge and classify it.

        Returns the confirmed press, or None for bounce or shutdown.
        """
        started = self.clock()

        # edge detection is unreliable unless the level is read before waiting
        self.driver.read_level(self.line_id)
        while not self.driver.wait_for_rising_edge(self.line_id, self.poll_timeout_s):
            if self._stop_event.is_set():
                return None

        elapsed_ms = (self.clock() - started) * 1000.0
        press = self.classifier.classify(self.line_id, elapsed_ms)
        if press is not None:
            logger.info(f"{self.name}: press on GPIO {self.line_id} after {elapsed_ms:.0f}ms")
            try:
                self.handler(press)
            except Exception as e:
                logger.error(f"{self.name}: press handler failed: {e}", exc_info=True)

        # clear stale level state before the next wait
        self.driver.read_level(self.line_id)
        return press

    def _loop(self):
        logger.info(f"{self.name}: monitoring GPIO {self.line_id} "
                    f"(debounce {self.classifier.threshold_ms}ms)")
        while not self._stop_event.is_set():
            self.run_once()
        logger.info(f"{self.name}: stopped")

    def start(self):
        if self._thread is not None and self._thread.is_alive():
            logger.warning(f"{self.name}: already running")
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, daemon=True, name=self.name)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None):
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout if timeout is not None else self.poll_timeout_s * 2)
            if not self._thread.is_alive():
                self._thread = None
            else:
                logger.warning(f"{self.name}: still busy after stop, will exit when the handler returns")

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
