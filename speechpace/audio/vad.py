"""Energy-based voice activity detection."""

import logging
from collections import deque
from typing import NamedTuple, Optional

from ..models.audio import AudioBuffer, EnergyReading
from ..models.settings import VadSettings

logger = logging.getLogger(__name__)


class VadResult(NamedTuple):
    """Classification of a single audio buffer."""
    is_voice: bool
    duration: float


class RmsHistory:
    """Fixed-capacity FIFO of recent RMS readings."""

    def __init__(self, capacity: int = 8):
        if capacity < 1:
            raise ValueError("RMS history capacity must be at least 1")
        self.capacity = capacity
        self._values = deque(maxlen=capacity)

    def push(self, rms: float) -> None:
        self._values.append(rms)

    def average(self) -> float:
        if not self._values:
            return 0.0
        return sum(self._values) / len(self._values)

    def clear(self) -> None:
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)


class VoiceActivityDetector:
    """Classifies audio buffers as speech or silence.

    A buffer counts as voice only when the averaged RMS over the recent
    history exceeds ``rms_threshold`` and the buffer's own peak exceeds
    ``peak_threshold``. The average rejects short pops, the peak test
    rejects steady background hum.
    """

    def __init__(self, settings: Optional[VadSettings] = None):
        self.settings = settings or VadSettings()
        self.history = RmsHistory(self.settings.rms_history_size)

        # Consecutive non-voice buffers. Informational only.
        self.silence_frames = 0
        self.last_reading: Optional[EnergyReading] = None
        self.last_average_rms = 0.0

    @property
    def in_pause(self) -> bool:
        """True once enough consecutive silent buffers have been seen."""
        return self.silence_frames >= self.settings.silence_frames_required

    def classify(self, buffer: AudioBuffer) -> VadResult:
        """Classify one buffer and return its voice flag and duration in seconds."""
        reading = EnergyReading.from_samples(buffer.samples)
        self.history.push(reading.rms)
        avg_rms = self.history.average()

        self.last_reading = reading
        self.last_average_rms = avg_rms

        is_voice = (avg_rms > self.settings.rms_threshold
                    and reading.peak > self.settings.peak_threshold)

        if is_voice:
            if self.in_pause:
                logger.debug(f"Voice resumed after {self.silence_frames} silent buffers")
            self.silence_frames = 0
            logger.debug(f"Voice detected - RMS: {avg_rms:.4f}, Peak: {reading.peak:.4f}")
        else:
            self.silence_frames += 1

        return VadResult(is_voice=is_voice, duration=buffer.duration_seconds)

    def reset(self) -> None:
        """Forget all history; called at session start and stop."""
        self.history.clear()
        self.silence_frames = 0
        self.last_reading = None
        self.last_average_rms = 0.0
