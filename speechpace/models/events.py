"""Event models for pub/sub publication of session output."""

import time
from dataclasses import dataclass, field


@dataclass
class AlertEvent:
    """A tactile alert fired by the alert controller."""
    rate: int
    threshold: int
    pulse_count: int
    pulse_interval_seconds: float
    timestamp: float = field(default_factory=time.time)
