"""Threshold classification and cooldown-gated tactile alerts."""

import time
import logging
from typing import Callable, Optional

from ..models.rate import AlertDecision, StatusLabel
from ..models.settings import AlertSettings
from .haptics import AbstractHapticActuator, PulseSequencer

logger = logging.getLogger(__name__)


STATUS_MESSAGES = {
    StatusLabel.TOO_HIGH: "Slow down! ({rate} WPM)",
    StatusLabel.TOO_LOW: "Speed up! ({rate} WPM)",
    StatusLabel.OK: "OK ({rate} WPM)",
}


def format_status(decision: AlertDecision) -> Optional[str]:
    """User-facing status line for a decision, None when there is nothing to say."""
    template = STATUS_MESSAGES.get(decision.status)
    if template is None:
        return None
    return template.format(rate=decision.rate)


class AlertController:
    """Classifies the smoothed rate and fires the pulse pattern when it runs too high.

    Only the upper bound produces a tactile alert; the lower bound is
    advisory and only changes the status. Alerts are spaced at least
    ``cooldown_seconds`` apart.
    """

    def __init__(self,
                 actuator: AbstractHapticActuator,
                 settings: Optional[AlertSettings] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.settings = settings or AlertSettings()
        self.clock = clock
        self.sequencer = PulseSequencer(actuator)
        self.last_fired: Optional[float] = None
        self.alerts_fired = 0

    def classify(self, rate: int, monitoring: bool = True) -> StatusLabel:
        if rate > self.settings.upper_threshold:
            return StatusLabel.TOO_HIGH
        if 0 < rate < self.settings.lower_threshold:
            return StatusLabel.TOO_LOW
        if monitoring:
            return StatusLabel.OK
        return StatusLabel.NONE

    def in_cooldown(self, now: float) -> bool:
        if self.last_fired is None:
            return False
        return now - self.last_fired < self.settings.cooldown_seconds

    def evaluate(self, rate: int, monitoring: bool = True, now: Optional[float] = None) -> AlertDecision:
        """Classify ``rate`` and fire the alert pattern if it is due.

        Args:
            rate: Smoothed WPM estimate
            monitoring: Whether the owning session is actively monitoring
            now: Evaluation time on the controller's clock, defaults to clock()

        Returns:
            AlertDecision with the status and whether an alert fired
        """
        status = self.classify(rate, monitoring)
        fire = False

        if status is StatusLabel.TOO_HIGH:
            now = self.clock() if now is None else now
            if self.in_cooldown(now):
                logger.debug(f"Alert in cooldown - {now - self.last_fired:.1f}s since last "
                             f"(requires {self.settings.cooldown_seconds}s)")
            else:
                fire = True
                self._fire(rate, now)

        return AlertDecision(status=status, fire_alert=fire, rate=rate)

    def _fire(self, rate: int, now: float) -> None:
        logger.info(f"Threshold {self.settings.upper_threshold} WPM exceeded ({rate} WPM), "
                    f"playing {self.settings.pulse_count} pulses")
        self.last_fired = now
        self.alerts_fired += 1
        self.sequencer.play(self.settings.pulse_count, self.settings.pulse_interval_seconds)

    def reset(self) -> None:
        """Cancel any in-flight pulse burst and clear the cooldown."""
        self.sequencer.cancel()
        self.last_fired = None
        self.alerts_fired = 0
