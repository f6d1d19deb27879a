"""Speech-density based words-per-minute estimation."""

import math
import logging
import threading
from typing import Optional, Tuple

from ..models.rate import RateUpdate
from ..models.settings import RateSettings

logger = logging.getLogger(__name__)


class WindowAccumulator:
    """Speaking and total time since the last rate computation."""

    def __init__(self):
        self.speaking_seconds = 0.0
        self.total_seconds = 0.0

    def add(self, is_voice: bool, duration: float) -> None:
        if duration <= 0:
            return
        self.total_seconds += duration
        if is_voice:
            self.speaking_seconds += duration

    def density(self) -> float:
        if self.total_seconds <= 0:
            return 0.0
        # Float drift must not push speaking time past the total
        return min(1.0, self.speaking_seconds / self.total_seconds)

    def reset(self) -> None:
        self.speaking_seconds = 0.0
        self.total_seconds = 0.0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class RateEstimator:
    """Converts per-buffer voice flags into a smoothed WPM estimate.

    Buffers are accumulated by the audio thread through ``on_buffer``; the
    scheduler calls ``compute_if_due`` once per update interval. Each
    computation consumes exactly one window, so the estimate never carries
    density from earlier windows except through the exponential smoothing.
    """

    def __init__(self, settings: Optional[RateSettings] = None):
        self.settings = settings or RateSettings()
        self.window = WindowAccumulator()
        self.current_rate = 0
        self.previous_rate = 0
        self.lock = threading.Lock()

    def on_buffer(self, is_voice: bool, duration: float) -> None:
        with self.lock:
            self.window.add(is_voice, duration)

    @property
    def accumulated_seconds(self) -> float:
        with self.lock:
            return self.window.total_seconds

    def window_totals(self) -> Tuple[float, float]:
        """Return (speaking_seconds, total_seconds) of the open window."""
        with self.lock:
            return self.window.speaking_seconds, self.window.total_seconds

    def instantaneous_rate(self, density: float) -> int:
        """Map density onto [min_wpm, max_wpm], truncated to a whole rate."""
        span = self.settings.max_wpm - self.settings.min_wpm
        # Tolerance keeps float error (e.g. 107.99999) from dropping a whole WPM
        return int(math.floor(self.settings.min_wpm + span * density + 1e-9))

    def smooth(self, prior: int, instantaneous: int) -> float:
        if prior <= 0:
            return instantaneous
        alpha = self.settings.smoothing_factor
        return prior * (1.0 - alpha) + instantaneous * alpha

    def compute_if_due(self) -> Optional[RateUpdate]:
        """Close the current window and publish a new rate, if a full interval has accumulated.

        Returns:
            RateUpdate for the closed window, or None while still accumulating
        """
        with self.lock:
            total = self.window.total_seconds
            if total < self.settings.update_interval_seconds:
                return None

            density = self.window.density()
            instantaneous = self.instantaneous_rate(density)
            prior = self.current_rate
            smoothed = round_half_up(self.smooth(prior, instantaneous))

            self.previous_rate = prior
            self.current_rate = smoothed
            self.window.reset()

        logger.debug(f"Density: {density:.2f}, instantaneous WPM: {instantaneous}, "
                     f"smoothed WPM: {smoothed} (prior {prior})")

        return RateUpdate(
            density=density,
            instantaneous_wpm=instantaneous,
            smoothed_wpm=smoothed,
            previous_wpm=prior,
            window_seconds=total,
        )

    def reset(self) -> None:
        with self.lock:
            self.window.reset()
            self.current_rate = 0
            self.previous_rate = 0
