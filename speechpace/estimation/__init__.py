"""Rate estimation, alerting and state publication."""

from .rate_estimator import RateEstimator, WindowAccumulator
from .alert_controller import AlertController, format_status
from .haptics import AbstractHapticActuator, TerminalBellActuator, LoggingHapticActuator, PulseSequencer
from .publisher import MonitorStatePublisher, STATE_TOPIC, ALERT_TOPIC

__all__ = [
    "RateEstimator",
    "WindowAccumulator",
    "AlertController",
    "format_status",
    "AbstractHapticActuator",
    "TerminalBellActuator",
    "LoggingHapticActuator",
    "PulseSequencer",
    "MonitorStatePublisher",
    "STATE_TOPIC",
    "ALERT_TOPIC",
]
