"""
Daily clean scheduling.

The engine knows nothing about wall-clock time; the host owns a scheduler
that simply calls a function at the configured hour every day.
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

logger = logging.getLogger(__name__)


def next_run_after(now: datetime, hour: int, minute: int = 0) -> datetime:
    """
    Next time the clock shows hour:minute, strictly after ``now``.

    Args:
        now: Current time
        hour: Hour of day (0-23)
        minute: Minute of hour (0-59)

    Returns:
        Today at hour:minute if that is still ahead, otherwise tomorrow
    """
    candidate = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate


class DailyScheduler:
    """Call a function once a day at a fixed time, on a background thread."""

    def __init__(
        self,
        callback: Callable[[], None],
        hour: int = 9,
        minute: int = 0,
        clock: Callable[[], datetime] = datetime.now,
    ):
        if not 0 <= hour <= 23:
            raise ValueError(f"hour must be between 0 and 23, got {hour}")
        if not 0 <= minute <= 59:
            raise ValueError(f"minute must be between 0 and 59, got {minute}")
        self.callback = callback
        self.hour = hour
        self.minute = minute
        self.clock = clock
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def next_run(self) -> datetime:
        return next_run_after(self.clock(), self.hour, self.minute)

    def start(self) -> None:
        """Start the background thread (no-op if already running)."""
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._loop, name="rackoff-scheduler", daemon=True
        )
        self._thread.start()
        logger.info(f"Daily clean scheduled for {self.hour:02d}:{self.minute:02d}")

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """Stop the thread and wait for it to exit."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def wait(self) -> None:
        """Block until stop() is called."""
        while not self._stop.wait(1.0):
            pass

    def run_pending(self) -> None:
        """Invoke the callback, logging instead of raising."""
        try:
            self.callback()
        except Exception as e:
            logger.error(f"Scheduled clean failed: {e}")

    def _loop(self) -> None:
        while not self._stop.is_set():
            due = self.next_run()
            delay = max(0.0, (due - self.clock()).total_seconds())
            logger.debug(f"Next scheduled clean at {due:%Y-%m-%d %H:%M}")
            if self._stop.wait(delay):
                break
            self.run_pending()
