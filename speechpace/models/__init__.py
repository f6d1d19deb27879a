"""Data models for the SpeechPace application."""

from .audio import AudioStats, AudioBuffer, EnergyReading
from .rate import StatusLabel, RateUpdate, AlertDecision
from .session import SessionStatus, MonitorState
from .events import AlertEvent
from .settings import AudioSettings, VadSettings, RateSettings, AlertSettings

__all__ = [
    "AudioStats",
    "AudioBuffer",
    "EnergyReading",
    "StatusLabel",
    "RateUpdate",
    "AlertDecision",
    "SessionStatus",
    "MonitorState",
    "AlertEvent",
    "AudioSettings",
    "VadSettings",
    "RateSettings",
    "AlertSettings",
]
