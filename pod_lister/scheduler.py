import logging
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicScheduler:
    """
    Run a task, wait out the interval, repeat until stopped.

    Cycles never overlap and missed intervals are not caught up: a slow
    cycle only pushes the next one back. An exception from the task ends
    the loop and propagates to the caller.
    """

    def __init__(self, task: Callable[[], Any], interval_seconds: float):
        self.task = task
        self.interval_seconds = interval_seconds
        self.cycles_run = 0
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self._running = False

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        """Ask the loop to exit at the next interval boundary"""
        self._stop_event.set()

    def run_once(self) -> Any:
        result = self.task()
        self.cycles_run += 1
        return result

    def run_forever(self, max_cycles: Optional[int] = None) -> None:
        with self._lock:
            if self._running:
                raise RuntimeError("scheduler is already running")
            self._running = True

        try:
            while not self._stop_event.is_set():
                self.run_once()
                if max_cycles is not None and self.cycles_run >= max_cycles:
                    break
                logger.debug(f"Waiting {self.interval_seconds}s until next cycle")
                if self._stop_event.wait(self.interval_seconds):
                    break
        finally:
            with self._lock:
                self._running = False
        logger.info(f"Scheduler stopped after {self.cycles_run} cycles")
