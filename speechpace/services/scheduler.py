"""Fixed-period scheduler running on its own thread."""

import logging
import threading
from threading import Thread, Event
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicScheduler:
    """Calls ``callback`` every ``period`` seconds until stopped."""

    def __init__(self, period: float, callback: Callable[[], None], name: str = "PeriodicScheduler"):
        if period <= 0:
            raise ValueError("Scheduler period must be positive")
        self.period = period
        self.callback = callback
        self.name = name
        self.stop_event = Event()
        self.thread: Optional[Thread] = None
        self.ticks = 0

    @property
    def is_running(self) -> bool:
        return self.thread is not None and self.thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            logger.warning(f"{self.name} already running")
            return
        self.stop_event.clear()
        self.ticks = 0
        self.thread = Thread(target=self._run, daemon=True)
        self.thread.name = self.name
        self.thread.start()
        logger.debug(f"{self.name} started with period {self.period}s")

    def stop(self) -> None:
        """Cancel future ticks and wait for an in-flight tick to finish."""
        self.stop_event.set()
        thread = self.thread
        if thread and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=2.0)
            if thread.is_alive():
                logger.warning(f"{self.name} did not stop cleanly")
        self.thread = None
        logger.debug(f"{self.name} stopped after {self.ticks} ticks")

    def _run(self) -> None:
        while not self.stop_event.wait(self.period):
            self.ticks += 1
            try:
                self.callback()
            except Exception as e:
                logger.error(f"Unhandled exception in {self.name} tick: {e}", exc_info=True)
