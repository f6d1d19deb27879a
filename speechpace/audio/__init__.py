"""Audio capture and voice activity detection module."""

from .capture import AudioCapture, CaptureDeviceError
from .vad import VoiceActivityDetector, VadResult, RmsHistory
from .permissions import AbstractPermissionProvider, AlwaysGrantPermission, DevicePresencePermission

__all__ = [
    'AudioCapture',
    'CaptureDeviceError',
    'VoiceActivityDetector',
    'VadResult',
    'RmsHistory',
    'AbstractPermissionProvider',
    'AlwaysGrantPermission',
    'DevicePresencePermission',
]
