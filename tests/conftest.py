"""Pytest configuration and fixtures for SpeechPace tests."""

import pytest
import tempfile
import threading
import logging
from unittest.mock import Mock, patch
import numpy as np

from speechpace.audio.capture import CaptureDeviceError
from speechpace.config import SpeechPaceConfig
from speechpace.estimation.haptics import AbstractHapticActuator
from speechpace.estimation.publisher import MonitorStatePublisher
from speechpace.models.audio import AudioBuffer


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def make_buffer():
    """Build AudioBuffers from simple signal patterns."""
    def generate(pattern="voice", amplitude=0.3, frames=1024, sample_rate=16000):
        """Generate one mono float buffer.

        Args:
            pattern: 'voice' (sine), 'silence', 'hum' (low steady sine), 'pop' (single spike)
            amplitude: Peak amplitude of the signal
            frames: Number of samples
            sample_rate: Sample rate in Hz
        """
        t = np.arange(frames) / sample_rate
        if pattern == "voice":
            samples = amplitude * np.sin(2 * np.pi * 500 * t)
        elif pattern == "silence":
            samples = np.zeros(frames)
        elif pattern == "hum":
            samples = amplitude * np.sin(2 * np.pi * 250 * t)
        elif pattern == "pop":
            samples = np.zeros(frames)
            samples[frames // 2] = amplitude
        else:
            raise ValueError(f"Unknown pattern: {pattern}")
        return AudioBuffer(samples=samples.astype(np.float32), sample_rate=sample_rate)

    return generate


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


class RecordingActuator(AbstractHapticActuator):
    """Actuator that remembers when each pulse was played."""

    def __init__(self):
        self.pulses = []
        self.lock = threading.Lock()

    def play_pulse(self) -> None:
        with self.lock:
            self.pulses.append(threading.current_thread().name)

    @property
    def count(self) -> int:
        with self.lock:
            return len(self.pulses)


@pytest.fixture
def recording_actuator():
    return RecordingActuator()


class FakeCapture:
    """Stand-in for AudioCapture that is driven by the test."""

    def __init__(self, callback, error_callback, fail_on_start=False):
        self.callback = callback
        self.error_callback = error_callback
        self.fail_on_start = fail_on_start
        self.is_recording = False
        self.start_calls = 0
        self.stop_calls = 0

    def start_recording(self):
        self.start_calls += 1
        if self.fail_on_start:
            raise CaptureDeviceError("Failed to open audio input: no device")
        self.is_recording = True

    def stop_recording(self):
        self.stop_calls += 1
        self.is_recording = False

    def feed(self, buffer):
        self.callback(buffer)

    def fail(self):
        self.is_recording = False
        self.error_callback(CaptureDeviceError("Audio read failed: device unplugged"))


@pytest.fixture
def capture_factory():
    """Capture factory that records every FakeCapture it builds."""
    class Factory:
        def __init__(self):
            self.captures = []
            self.fail_on_start = False

        def __call__(self, callback, error_callback):
            capture = FakeCapture(callback, error_callback, fail_on_start=self.fail_on_start)
            self.captures.append(capture)
            return capture

        @property
        def last(self):
            return self.captures[-1]

    return Factory()


@pytest.fixture
def mock_publisher():
    return Mock(spec=MonitorStatePublisher)


@pytest.fixture
def default_config():
    return SpeechPaceConfig()


@pytest.fixture
def mock_pyaudio():
    """Mock PyAudio for testing without actual audio hardware."""
    with patch('pyaudio.PyAudio') as mock_pyaudio_class:
        mock_pyaudio_instance = Mock()
        mock_stream = Mock()

        # Configure mock stream: 1024 float32 samples of silence
        mock_stream.read.return_value = np.zeros(1024, dtype=np.float32).tobytes()
        mock_stream.stop_stream.return_value = None
        mock_stream.close.return_value = None

        mock_pyaudio_instance.open.return_value = mock_stream
        mock_pyaudio_instance.terminate.return_value = None

        mock_pyaudio_class.return_value = mock_pyaudio_instance

        yield {
            'class': mock_pyaudio_class,
            'instance': mock_pyaudio_instance,
            'stream': mock_stream
        }
