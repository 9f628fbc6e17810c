"""Background timer for periodic maintenance jobs."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Run ``func`` every ``interval_seconds`` on a dedicated daemon thread.

    The delay is measured from the end of one run to the start of the next.
    Exceptions raised by ``func`` are logged and do not stop later runs.
    """

    def __init__(self, name: str, interval_seconds: float, func: Callable[[], object]) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.name = name
        self.interval_seconds = float(interval_seconds)
        self._func = func
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self.run_count = 0

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self.is_running:
                return
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._loop, name=self.name, daemon=True)
            self._thread.start()
        logger.debug("Started periodic task %s every %.1fs", self.name, self.interval_seconds)

    def stop(self, timeout: Optional[float] = 10.0) -> None:
        with self._lock:
            thread = self._thread
            self._stop_event.set()
            self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("Periodic task %s did not stop within %ss", self.name, timeout)
        logger.debug("Stopped periodic task %s", self.name)

    def run_once(self) -> None:
        try:
            self._func()
        except Exception:
            logger.exception("Periodic task %s failed", self.name)
        finally:
            self.run_count += 1

    def _loop(self) -> None:
        while not self._stop_event.wait(self.interval_seconds):
            self.run_once()
