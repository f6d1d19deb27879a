"""Rate estimation and alerting data models."""

from dataclasses import dataclass
from enum import Enum


class StatusLabel(Enum):
    """Classification of a smoothed rate against the configured bounds."""
    TOO_HIGH = "rate too high"
    TOO_LOW = "rate too low"
    OK = "ok"
    NONE = "none"


@dataclass(frozen=True)
class RateUpdate:
    """Result of one completed rate window."""
    density: float
    instantaneous_wpm: int
    smoothed_wpm: int
    previous_wpm: int
    window_seconds: float


@dataclass(frozen=True)
class AlertDecision:
    """Outcome of evaluating a smoothed rate."""
    status: StatusLabel
    fire_alert: bool
    rate: int
