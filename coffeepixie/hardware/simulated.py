"""Simulated line backend for development machines and tests"""

import logging
import queue
import threading
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


class SimulatedGPIO:
    """In-memory LineDriver.

    Edges are injected with ``inject_edge`` and delivered to whoever is
    blocked in ``wait_for_rising_edge`` on that line. Every ``set_level`` is
    recorded in ``history`` as ``(line_id, high)``.
    """

    def __init__(self):
        self._levels: Dict[int, bool] = {}
        self._edges: Dict[int, "queue.Queue[bool]"] = {}
        self._lock = threading.Lock()
        self.history: List[Tuple[int, bool]] = []
        self.reads: Dict[int, int] = {}
        logger.info("⚠️  GPIO simulation mode (no hardware)")

    def _edge_queue(self, line_id: int) -> "queue.Queue[bool]":
        with self._lock:
            return self._edges.setdefault(line_id, queue.Queue())

    def setup_input(self, line_id: int):
        self._edge_queue(line_id)
        with self._lock:
            self._levels.setdefault(line_id, False)
        logger.debug(f"[SIMULATED GPIO] setup input {line_id}")

    def setup_output(self, line_id: int, initial: bool = False):
        with self._lock:
            self._levels[line_id] = initial
        logger.debug(f"[SIMULATED GPIO] setup output {line_id} initial={initial}")

    def set_level(self, line_id: int, high: bool):
        with self._lock:
            self._levels[line_id] = high
            self.history.append((line_id, high))
        logger.info(f"[SIMULATED GPIO] 🔌 output(pin={line_id}, state={'HIGH' if high else 'LOW'})")

    def read_level(self, line_id: int) -> bool:
        with self._lock:
            self.reads[line_id] = self.reads.get(line_id, 0) + 1
            return self._levels.get(line_id, False)

    def inject_edge(self, line_id: int):
        """Simulate a rising edge on an input line"""
        with self._lock:
            self._levels[line_id] = True
        self._edge_queue(line_id).put(True)

    def wait_for_rising_edge(self, line_id: int, timeout_s: Optional[float] = None) -> bool:
        try:
            self._edge_queue(line_id).get(timeout=timeout_s)
        except queue.Empty:
            return False
        return True

    def level(self, line_id: int) -> bool:
        """Current level of a line without counting it as a read"""
        with self._lock:
            return self._levels.get(line_id, False)

    def cleanup(self):
        with self._lock:
            self._levels.clear()
        logger.debug("[SIMULATED GPIO] cleanup()")
