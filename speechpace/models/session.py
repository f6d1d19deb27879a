"""Session-related data models."""

from dataclasses import dataclass
from enum import Enum


class SessionStatus(Enum):
    """Externally observable lifecycle state of a monitoring session."""
    IDLE = "idle"
    STARTING = "starting"
    MONITORING = "monitoring"
    PERMISSION_DENIED = "permission_denied"
    AUDIO_ERROR = "audio_error"


@dataclass(frozen=True)
class MonitorState:
    """Snapshot of everything the presentation layer displays."""
    session_status: SessionStatus
    is_monitoring: bool
    current_rate: int
    status_message: str
    elapsed_seconds: float = 0.0
    wpm_above_threshold: bool = False
