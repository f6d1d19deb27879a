"""Tactile output: actuators and the cancellable pulse burst sequencer."""

import logging
import threading
from abc import ABC, abstractmethod
from threading import Thread, Event
from typing import Optional

from rich.console import Console

logger = logging.getLogger(__name__)


class AbstractHapticActuator(ABC):
    """Plays one discrete tactile pulse."""

    @abstractmethod
    def play_pulse(self) -> None:
        pass


class TerminalBellActuator(AbstractHapticActuator):
    """Rings the terminal bell; the closest thing to a wrist tap on a desktop."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def play_pulse(self) -> None:
        self.console.bell()


class LoggingHapticActuator(AbstractHapticActuator):
    """Silent actuator that only records pulses in the log."""

    def __init__(self):
        self.pulses_played = 0

    def play_pulse(self) -> None:
        self.pulses_played += 1
        logger.info(f"Haptic pulse #{self.pulses_played}")


class PulseSequencer:
    """Plays bursts of evenly spaced pulses on a single worker thread.

    Only one burst is ever in flight. Starting a burst cancels the previous
    one, and once ``cancel`` returns no further pulse is played.
    """

    def __init__(self, actuator: AbstractHapticActuator):
        self.actuator = actuator
        self.lock = threading.Lock()
        self.burst_thread: Optional[Thread] = None
        self.cancel_event: Optional[Event] = None
        self.bursts_started = 0

    def play(self, count: int, interval: float) -> None:
        """Start a burst of ``count`` pulses spaced ``interval`` seconds apart."""
        with self.lock:
            self._cancel_locked()
            cancel_event = Event()
            self.bursts_started += 1
            thread = Thread(target=self._run_burst, args=(count, interval, cancel_event), daemon=True)
            thread.name = f"PulseBurst-{self.bursts_started}"
            self.cancel_event = cancel_event
            self.burst_thread = thread
            thread.start()

    def cancel(self) -> None:
        """Stop the in-flight burst, if any, and wait for its thread."""
        with self.lock:
            self._cancel_locked()

    def is_playing(self) -> bool:
        with self.lock:
            return self.burst_thread is not None and self.burst_thread.is_alive()

    def _cancel_locked(self) -> None:
        if self.cancel_event is not None:
            self.cancel_event.set()
        thread = self.burst_thread
        if thread and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=2.0)
            if thread.is_alive():
                logger.warning(f"{thread.name} did not stop cleanly")
        self.burst_thread = None
        self.cancel_event = None

    def _run_burst(self, count: int, interval: float, cancel_event: Event) -> None:
        for index in range(count):
            if cancel_event.is_set():
                logger.debug(f"Pulse burst cancelled after {index} pulses")
                return
            try:
                self.actuator.play_pulse()
            except Exception as e:
                logger.warning(f"Haptic actuator failed on pulse {index + 1}: {e}")
            if index < count - 1 and cancel_event.wait(interval):
                logger.debug(f"Pulse burst cancelled after {index + 1} pulses")
                return
        logger.debug(f"Pulse burst complete ({count} pulses)")
