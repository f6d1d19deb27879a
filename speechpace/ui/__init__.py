"""Terminal presentation for SpeechPace."""

from .monitor_screen import MonitorScreen

__all__ = ["MonitorScreen"]
