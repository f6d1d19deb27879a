"""Monitoring session: lifecycle of one speaking-rate measurement run."""

import time
import logging
import threading
from functools import partial
from threading import Thread
from typing import Callable, Optional

from ..audio.capture import AudioCapture, CaptureDeviceError
from ..audio.permissions import AbstractPermissionProvider, AlwaysGrantPermission
from ..audio.vad import VoiceActivityDetector
from ..config import SpeechPaceConfig
from ..estimation.alert_controller import AlertController, format_status
from ..estimation.haptics import AbstractHapticActuator
from ..estimation.publisher import MonitorStatePublisher
from ..estimation.rate_estimator import RateEstimator
from ..models.audio import AudioBuffer
from ..models.events import AlertEvent
from ..models.session import MonitorState, SessionStatus
from .scheduler import PeriodicScheduler

logger = logging.getLogger(__name__)


MESSAGE_READY = "Ready"
MESSAGE_STARTING = "Starting..."
MESSAGE_MONITORING = "Monitoring..."
MESSAGE_PERMISSION_DENIED = "Microphone access denied. Check the settings."
MESSAGE_AUDIO_ERROR = "Audio error"

CaptureFactory = Callable[[Callable[[AudioBuffer], None], Callable[[CaptureDeviceError], None]], AudioCapture]


class MonitoringSession:
    """Owns the detector, estimator and alert controller for one monitoring run.

    Three threads touch a session: the capture thread delivering buffers,
    the scheduler thread computing the rate once per update interval, and
    whichever thread calls ``start``/``stop``. All of them go through
    ``self.lock``. Callbacks carry the generation they were created for, so
    a buffer, tick or authorization result that belongs to a stopped run
    is dropped.

    State snapshots are published while the lock is held, so subscribers
    see them in order and must not block.
    """

    def __init__(self,
                 config: SpeechPaceConfig,
                 actuator: AbstractHapticActuator,
                 permission_provider: Optional[AbstractPermissionProvider] = None,
                 publisher: Optional[MonitorStatePublisher] = None,
                 capture_factory: Optional[CaptureFactory] = None,
                 clock: Callable[[], float] = time.monotonic):
        """Initialize monitoring session.

        Args:
            config: Application configuration
            actuator: Tactile output used for rate alerts
            permission_provider: Capture authorization, granted implicitly if None
            publisher: Destination for state snapshots and alert events
            capture_factory: Builds the capture device from (buffer_callback, error_callback)
            clock: Monotonic clock used for cooldowns and elapsed time
        """
        self.config = config
        self.rate_settings = config.rate_settings()
        self.alert_settings = config.alert_settings()
        self.audio_settings = config.audio_settings()

        self.permission_provider = permission_provider or AlwaysGrantPermission()
        self.publisher = publisher or MonitorStatePublisher()
        self.capture_factory = capture_factory or self._create_audio_capture
        self.clock = clock

        self.vad = VoiceActivityDetector(config.vad_settings())
        self.estimator = RateEstimator(self.rate_settings)
        self.alerts = AlertController(actuator, self.alert_settings, clock=clock)

        self.lock = threading.RLock()
        self.status = SessionStatus.IDLE
        self.status_message = MESSAGE_READY
        self.generation = 0
        self.started_at: Optional[float] = None

        self.audio_capture: Optional[AudioCapture] = None
        self.scheduler: Optional[PeriodicScheduler] = None
        self.permission_thread: Optional[Thread] = None

    def _create_audio_capture(self, callback, error_callback) -> AudioCapture:
        return AudioCapture(
            callback=callback,
            error_callback=error_callback,
            sample_rate=self.audio_settings.sample_rate,
            chunk_size=self.audio_settings.chunk_size,
            channels=self.audio_settings.channels,
            device_index=self.audio_settings.device_index,
        )

    # Published state

    @property
    def is_monitoring(self) -> bool:
        with self.lock:
            return self.status is SessionStatus.MONITORING

    @property
    def current_rate(self) -> int:
        return self.estimator.current_rate

    def snapshot(self) -> MonitorState:
        with self.lock:
            monitoring = self.status is SessionStatus.MONITORING
            rate = self.estimator.current_rate
            elapsed = 0.0
            if monitoring and self.started_at is not None:
                elapsed = self.clock() - self.started_at
            return MonitorState(
                session_status=self.status,
                is_monitoring=monitoring,
                current_rate=rate,
                status_message=self.status_message,
                elapsed_seconds=elapsed,
                wpm_above_threshold=monitoring and rate > self.alert_settings.upper_threshold,
            )

    def _publish(self) -> None:
        self.publisher.publish_state(self.snapshot())

    def _is_current(self, generation: int) -> bool:
        return generation == self.generation and self.status is SessionStatus.MONITORING

    # Lifecycle

    def start(self, blocking: bool = False) -> None:
        """Request capture authorization and begin monitoring once granted.

        Args:
            blocking: Wait for the authorization request to resolve before returning
        """
        with self.lock:
            if self.status in (SessionStatus.MONITORING, SessionStatus.STARTING):
                logger.info(f"Start ignored, session is {self.status.value}")
                return

            self.generation += 1
            self.status = SessionStatus.STARTING
            self.status_message = MESSAGE_STARTING
            logger.info(f"Session {self.generation} starting, requesting microphone access")
            self._publish()

            thread = Thread(target=self._authorize, args=(self.generation,), daemon=True)
            thread.name = "PermissionThread"
            self.permission_thread = thread
            thread.start()

        if blocking:
            thread.join()

    def wait_for_authorization(self, timeout: Optional[float] = None) -> bool:
        """Block until the pending authorization request (if any) has resolved."""
        thread = self.permission_thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def _authorize(self, generation: int) -> None:
        try:
            granted = self.permission_provider.request_access()
        except Exception as e:
            logger.error(f"Permission request failed: {e}", exc_info=True)
            granted = False

        with self.lock:
            if generation != self.generation or self.status is not SessionStatus.STARTING:
                logger.info(f"Authorization for session {generation} resolved after stop; ignoring")
                return

            if not granted:
                logger.warning("Microphone access denied")
                self.status = SessionStatus.PERMISSION_DENIED
                self.status_message = MESSAGE_PERMISSION_DENIED
                self._publish()
                return

            self._reset_session_state()
            try:
                capture = self.capture_factory(
                    partial(self._on_audio_buffer, generation),
                    partial(self._on_capture_error, generation),
                )
                capture.start_recording()
            except CaptureDeviceError as e:
                logger.error(f"Error starting audio capture: {e}")
                self._reset_session_state()
                self.status = SessionStatus.AUDIO_ERROR
                self.status_message = MESSAGE_AUDIO_ERROR
                self._publish()
                return
            except Exception as e:
                logger.error(f"Unexpected error starting audio capture: {e}", exc_info=True)
                self._reset_session_state()
                self.status = SessionStatus.AUDIO_ERROR
                self.status_message = MESSAGE_AUDIO_ERROR
                self._publish()
                return

            self.audio_capture = capture
            self.scheduler = PeriodicScheduler(
                self.rate_settings.update_interval_seconds,
                partial(self._on_tick, generation),
            )
            self.scheduler.start()

            self.started_at = self.clock()
            self.status = SessionStatus.MONITORING
            self.status_message = MESSAGE_MONITORING
            logger.info(f"Session {generation} monitoring")
            self._publish()

    def stop(self) -> None:
        """Stop monitoring, release the device and clear all per-session state.

        No buffer or tick is processed once this has been called, and both
        worker threads have finished when it returns.
        """
        with self.lock:
            if self.status is SessionStatus.IDLE:
                logger.debug("Stop ignored, session already idle")
                return

            logger.info(f"Stopping session {self.generation} ({self.status.value})")
            capture, scheduler = self._detach_workers()
            self.status = SessionStatus.IDLE
            self.status_message = MESSAGE_READY
            self._publish()

        self._join_workers(capture, scheduler)

    def shutdown(self) -> None:
        """Stop the session and wait for a pending authorization thread."""
        self.stop()
        self.wait_for_authorization(timeout=2.0)

    def _detach_workers(self):
        """Invalidate the running generation and hand back its workers. Caller holds the lock."""
        self.generation += 1
        capture, scheduler = self.audio_capture, self.scheduler
        self.audio_capture = None
        self.scheduler = None
        self._reset_session_state()
        return capture, scheduler

    def _join_workers(self, capture: Optional[AudioCapture], scheduler: Optional[PeriodicScheduler]) -> None:
        # Outside the lock: both threads may be waiting on it
        if scheduler:
            scheduler.stop()
        if capture:
            capture.stop_recording()

    def _reset_session_state(self) -> None:
        self.vad.reset()
        self.estimator.reset()
        self.alerts.reset()
        self.started_at = None

    # Worker callbacks

    def _on_audio_buffer(self, generation: int, buffer: AudioBuffer) -> None:
        with self.lock:
            if not self._is_current(generation):
                return
            result = self.vad.classify(buffer)
            self.estimator.on_buffer(result.is_voice, result.duration)

    def _on_tick(self, generation: int) -> None:
        with self.lock:
            if not self._is_current(generation):
                return

            update = self.estimator.compute_if_due()
            if update is None:
                self.status_message = f"Monitoring: {int(self.estimator.accumulated_seconds)}s"
                self._publish()
                return

            decision = self.alerts.evaluate(update.smoothed_wpm, monitoring=True)
            message = format_status(decision)
            if message:
                self.status_message = message

            if decision.fire_alert:
                self.publisher.publish_alert(AlertEvent(
                    rate=decision.rate,
                    threshold=self.alert_settings.upper_threshold,
                    pulse_count=self.alert_settings.pulse_count,
                    pulse_interval_seconds=self.alert_settings.pulse_interval_seconds,
                ))
            self._publish()

    def _on_capture_error(self, generation: int, error: CaptureDeviceError) -> None:
        with self.lock:
            if not self._is_current(generation):
                return
            logger.error(f"Capture device failure, stopping session: {error}")
            capture, scheduler = self._detach_workers()
            self.status = SessionStatus.AUDIO_ERROR
            self.status_message = MESSAGE_AUDIO_ERROR
            self._publish()

        self._join_workers(capture, scheduler)
