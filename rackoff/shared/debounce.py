"""
Coalesce bursts of calls into one call after a quiet period.
"""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Run a function once calls have stopped for ``wait_seconds``.

    Each trigger() restarts the countdown, so a burst of changes produces a
    single call.
    """

    def __init__(self, func: Callable[[], None], wait_seconds: float = 0.5):
        self.func = func
        self.wait_seconds = wait_seconds
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def trigger(self) -> None:
        """Schedule a call, replacing any pending one."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.wait_seconds, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> None:
        """Run a pending call now instead of waiting."""
        with self._lock:
            timer = self._timer
            self._timer = None
        if timer is not None:
            timer.cancel()
            self._call()

    def cancel(self) -> None:
        """Drop a pending call."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _fire(self) -> None:
        with self._lock:
            if self._timer is None or threading.current_thread() is not self._timer:
                return
            self._timer = None
        self._call()

    def _call(self) -> None:
        try:
            self.func()
        except Exception as e:
            logger.error(f"Debounced call failed: {e}")
