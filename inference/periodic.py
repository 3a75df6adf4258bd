"""Cancellable fixed-period background task."""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Call a function every ``period`` seconds on a daemon thread until cancelled."""

    def __init__(self, callback: Callable[[], None], period: float = 1.0,
                 name: str = "periodic-task"):
        """
        Initialize periodic task.

        Args:
            callback: Function run once per tick
            period: Seconds between ticks
            name: Thread name
        """
        if period <= 0:
            raise ValueError(f"period must be positive, got {period}")

        self.callback = callback
        self.period = period
        self.name = name
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()

    def start(self):
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run_loop, name=self.name, daemon=True)
        self._thread.start()

    def cancel(self, timeout: Optional[float] = 2.0):
        """
        Stop ticking and wait for an in-flight tick to finish.

        Safe to call from inside the callback.
        """
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
        self._thread = None

    def _run_loop(self):
        # wait() returns True as soon as cancel() is called
        while not self._stop.wait(self.period):
            try:
                self.callback()
            except Exception:
                logger.exception(f"{self.name}: tick failed")
