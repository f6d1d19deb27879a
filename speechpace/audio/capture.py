"""Audio capture module delivering fixed-size float buffers from the microphone."""

import pyaudio
import logging
import threading
from threading import Thread, Event
from typing import Optional, Callable
from datetime import datetime
import numpy as np

from ..models.audio import AudioBuffer, AudioStats


logger = logging.getLogger(__name__)


class CaptureDeviceError(Exception):
    """The capture device could not be opened or stopped delivering audio."""


class AudioCapture:
    """Continuous mono float32 capture on a background thread."""

    def __init__(
        self,
        callback: Callable[[AudioBuffer], None],
        sample_rate: int = 16000,
        chunk_size: int = 1024,
        channels: int = 1,
        device_index: Optional[int] = None,
        error_callback: Optional[Callable[[CaptureDeviceError], None]] = None,
    ):
        """Initialize audio capture with specified parameters.

        Args:
            callback: Receives one AudioBuffer per chunk, on the capture thread
            sample_rate: Audio sample rate in Hz
            chunk_size: Size of each audio chunk in samples
            channels: Number of audio channels (only mono is analysed)
            device_index: PyAudio input device, None for the system default
            error_callback: Called on the capture thread if reading fails
        """
        self.buffer_callback = callback
        self.error_callback = error_callback
        self.sample_rate = sample_rate
        self.chunk_size = chunk_size
        self.channels = channels
        self.device_index = device_index

        # Recording thread management
        self.recording_thread: Optional[Thread] = None
        self.stop_event = Event()
        self.is_recording = False

        # Statistics tracking
        self.start_time: Optional[datetime] = None
        self.total_chunks = 0

        self.pyaudio_instance: Optional[pyaudio.PyAudio] = None
        self.stream = None

    def start_recording(self) -> None:
        """Open the input stream and start reading in a background thread.

        Raises:
            CaptureDeviceError: if the device cannot be opened
        """
        if self.is_recording:
            logger.warning("Recording already in progress")
            return

        logger.info("Starting audio recording")
        self.stop_event.clear()
        self.start_time = datetime.now()
        self.total_chunks = 0

        try:
            self.stream = self.__open_audio_stream()
        except Exception as e:
            self.__release_audio_resources()
            raise CaptureDeviceError(f"Failed to open audio input: {e}") from e

        self.recording_thread = Thread(target=self._record_continuously, daemon=True)
        self.recording_thread.name = "AudioCaptureThread"
        self.is_recording = True
        self.recording_thread.start()

    def stop_recording(self) -> None:
        """Stop recording and clean up resources."""
        if not self.is_recording:
            logger.debug("No recording in progress")
            return

        logger.info("Stopping audio recording")
        self.stop_event.set()
        self.is_recording = False

        # The capture thread may be the caller when a read error triggers cleanup
        if (self.recording_thread and self.recording_thread.is_alive()
                and self.recording_thread is not threading.current_thread()):
            self.recording_thread.join(timeout=2.0)
            if self.recording_thread.is_alive():
                logger.warning("Recording thread did not stop cleanly")

        logger.info(f"Recording stopped. Total chunks: {self.total_chunks}")

    def __open_audio_stream(self):
        self.pyaudio_instance = pyaudio.PyAudio()
        stream = self.pyaudio_instance.open(
            format=pyaudio.paFloat32,
            channels=self.channels,
            rate=self.sample_rate,
            input=True,
            input_device_index=self.device_index,
            frames_per_buffer=self.chunk_size,
            stream_callback=None
        )
        logger.info(f"Audio stream opened: {self.sample_rate}Hz, "
                    f"{self.chunk_size} samples/chunk")
        return stream

    def __read_audio_buffer(self) -> AudioBuffer:
        raw = self.stream.read(self.chunk_size, exception_on_overflow=False)
        samples = np.frombuffer(raw, dtype=np.float32)
        if self.channels > 1:
            # Analyse the first channel only
            samples = samples[::self.channels]

        self.total_chunks += 1
        return AudioBuffer(samples=samples, sample_rate=self.sample_rate)

    def __release_audio_resources(self) -> None:
        if self.stream is not None:
            try:
                self.stream.stop_stream()
                self.stream.close()
            except (OSError, IOError) as e:
                logger.warning(f"Error closing audio stream: {e}")
            self.stream = None
        if self.pyaudio_instance is not None:
            self.pyaudio_instance.terminate()
            self.pyaudio_instance = None

    def _record_continuously(self) -> None:
        """Internal method: continuous recording loop in background thread."""
        try:
            while not self.stop_event.is_set():
                audio_buffer = self.__read_audio_buffer()
                if self.stop_event.is_set():
                    break
                self.buffer_callback(audio_buffer)
        except Exception as e:
            logger.error(f"Audio read failed: {e}", exc_info=True)
            self.is_recording = False
            if self.error_callback:
                self.error_callback(CaptureDeviceError(f"Audio read failed: {e}"))
        finally:
            self.__release_audio_resources()

    def get_recording_stats(self) -> AudioStats:
        """Get current recording statistics."""
        duration = 0.0
        if self.start_time:
            duration = (datetime.now() - self.start_time).total_seconds()

        return AudioStats(
            is_recording=self.is_recording,
            duration_seconds=duration,
            sample_rate=self.sample_rate,
            chunk_size=self.chunk_size,
            total_chunks=self.total_chunks,
        )

    def __del__(self):
        """Ensure resources are cleaned up on deletion."""
        if self.is_recording:
            self.stop_recording()
