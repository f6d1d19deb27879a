"""Microphone authorization providers."""

from abc import ABC, abstractmethod
import logging

import pyaudio

logger = logging.getLogger(__name__)


class AbstractPermissionProvider(ABC):
    """Answers whether the session may capture audio.

    ``request_access`` may block (e.g. waiting for a user prompt); the
    monitoring session always calls it off the caller's thread.
    """

    @abstractmethod
    def request_access(self) -> bool:
        """Return True if capture is authorized."""
        pass


class AlwaysGrantPermission(AbstractPermissionProvider):
    """Desktop default: capture authorization is implicit."""

    def request_access(self) -> bool:
        return True


class DevicePresencePermission(AbstractPermissionProvider):
    """Grants access only if at least one input device is present."""

    def request_access(self) -> bool:
        pa = pyaudio.PyAudio()
        try:
            for index in range(pa.get_device_count()):
                info = pa.get_device_info_by_index(index)
                if info.get('maxInputChannels', 0) > 0:
                    logger.debug(f"Found input device: {info.get('name')}")
                    return True
            logger.warning("No audio input devices found")
            return False
        finally:
            pa.terminate()
