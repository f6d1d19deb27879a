"""Tuning constants for the estimation pipeline."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AudioSettings:
    """Capture device parameters."""
    sample_rate: int = 16000
    chunk_size: int = 1024
    channels: int = 1
    device_index: Optional[int] = None

    def __post_init__(self):
        if self.sample_rate <= 0 or self.chunk_size <= 0:
            raise ValueError("sample_rate and chunk_size must be positive")
        if self.channels != 1:
            raise ValueError("Only mono capture is supported")


@dataclass(frozen=True)
class VadSettings:
    """Voice activity detection thresholds."""
    rms_threshold: float = 0.05
    peak_threshold: float = 0.08
    rms_history_size: int = 8
    silence_frames_required: int = 10

    def __post_init__(self):
        if self.rms_threshold < 0 or self.peak_threshold < 0:
            raise ValueError("VAD thresholds must be non-negative")
        if self.rms_history_size < 1:
            raise ValueError("rms_history_size must be at least 1")
        if self.silence_frames_required < 1:
            raise ValueError("silence_frames_required must be at least 1")


@dataclass(frozen=True)
class RateSettings:
    """Density to WPM mapping and smoothing."""
    min_wpm: int = 60
    max_wpm: int = 300
    smoothing_factor: float = 0.5
    update_interval_seconds: float = 1.0

    def __post_init__(self):
        if self.min_wpm < 0 or self.min_wpm > self.max_wpm:
            raise ValueError("Expected 0 <= min_wpm <= max_wpm")
        if not 0.0 <= self.smoothing_factor <= 1.0:
            raise ValueError("smoothing_factor must be within [0, 1]")
        if self.update_interval_seconds <= 0:
            raise ValueError("update_interval_seconds must be positive")


@dataclass(frozen=True)
class AlertSettings:
    """Rate thresholds, cooldown and pulse pattern."""
    upper_threshold: int = 130
    lower_threshold: int = 80
    cooldown_seconds: float = 2.0
    pulse_count: int = 10
    pulse_interval_seconds: float = 0.3

    def __post_init__(self):
        if self.lower_threshold < 0 or self.lower_threshold > self.upper_threshold:
            raise ValueError("Expected 0 <= lower_threshold <= upper_threshold")
        if self.cooldown_seconds < 0:
            raise ValueError("cooldown_seconds must be non-negative")
        if self.pulse_count < 1 or self.pulse_interval_seconds < 0:
            raise ValueError("Pulse pattern needs at least one pulse and a non-negative interval")
