"""Services layer for SpeechPace application logic."""

from .monitoring_session import MonitoringSession
from .scheduler import PeriodicScheduler

__all__ = [
    "MonitoringSession",
    "PeriodicScheduler",
]
