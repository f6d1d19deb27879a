"""Audio-related data models."""

from dataclasses import dataclass

import numpy as np


@dataclass
class AudioStats:
    """Audio recording statistics."""
    is_recording: bool
    duration_seconds: float
    sample_rate: int
    chunk_size: int
    total_chunks: int


@dataclass
class AudioBuffer:
    """One capture interval of mono float samples."""
    samples: np.ndarray
    sample_rate: int

    @property
    def frame_count(self) -> int:
        return len(self.samples)

    @property
    def duration_seconds(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return self.frame_count / self.sample_rate


@dataclass(frozen=True)
class EnergyReading:
    """Energy features of a single buffer."""
    rms: float
    peak: float

    @classmethod
    def from_samples(cls, samples: np.ndarray) -> "EnergyReading":
        if len(samples) == 0:
            return cls(rms=0.0, peak=0.0)
        data = np.asarray(samples, dtype=np.float64)
        rms = float(np.sqrt(np.mean(np.square(data))))
        peak = float(np.max(np.abs(data)))
        return cls(rms=rms, peak=peak)
