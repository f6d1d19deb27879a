"""Simple YAML configuration loader for SpeechPace."""

import copy
import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from ..models.settings import AudioSettings, VadSettings, RateSettings, AlertSettings

logger = logging.getLogger(__name__)


DEFAULT_CONFIG: Dict[str, Any] = {
    "audio": {
        "sample_rate": 16000,
        "chunk_size": 1024,
        "channels": 1,
        "device_index": None,
    },
    "vad": {
        "rms_threshold": 0.05,
        "peak_threshold": 0.08,
        "rms_history_size": 8,
        "silence_frames_required": 10,
    },
    "rate": {
        "min_wpm": 60,
        "max_wpm": 300,
        "smoothing_factor": 0.5,
        "update_interval_seconds": 1.0,
    },
    "alert": {
        "upper_threshold": 130,
        "lower_threshold": 80,
        "cooldown_seconds": 2.0,
        "pulse_count": 10,
        "pulse_interval_seconds": 0.3,
    },
    "logging": {
        "level": "INFO",
        "file_path": "data/logs/speechpace.log",
        "console_output": True,
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class SpeechPaceConfig:
    """SpeechPace configuration loader."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to YAML config file. If None, the built-in
                        defaults are used as-is.
        """
        self.config_file: Optional[Path] = Path(config_path) if config_path else None

        if self.config_file is None:
            logger.info("No configuration file given, using defaults")
            self.config = copy.deepcopy(DEFAULT_CONFIG)
            return

        if not self.config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_file}")

        logger.info(f"Loading configuration from: {self.config_file}")
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ValueError("Configuration file must contain a mapping at the top level")

        config = _deep_merge(DEFAULT_CONFIG, loaded)
        self._resolve_paths(config)

        logger.info("Configuration loaded successfully")
        return config

    def _resolve_paths(self, config: Dict[str, Any]) -> None:
        """Resolve relative paths in configuration relative to config file location."""
        config_dir = self.config_file.parent

        log_path = config.get('logging', {}).get('file_path')
        if log_path and not os.path.isabs(log_path):
            config['logging']['file_path'] = str(config_dir / log_path)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'vad.rms_threshold').

        Args:
            key_path: Dot-separated key path
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value (e.g., 'alert.cooldown_seconds')
            value: Value to set
        """
        keys = key_path.split('.')
        config_dict = self.config

        for key in keys[:-1]:
            if key not in config_dict:
                config_dict[key] = {}
            config_dict = config_dict[key]

        config_dict[keys[-1]] = value
        logger.debug(f"Configuration key '{key_path}' set to: {value}")

    def audio_settings(self) -> AudioSettings:
        return AudioSettings(**self._section('audio', AudioSettings))

    def vad_settings(self) -> VadSettings:
        return VadSettings(**self._section('vad', VadSettings))

    def rate_settings(self) -> RateSettings:
        return RateSettings(**self._section('rate', RateSettings))

    def alert_settings(self) -> AlertSettings:
        return AlertSettings(**self._section('alert', AlertSettings))

    def _section(self, name: str, settings_cls) -> Dict[str, Any]:
        """Pick the keys of a config section that the settings class knows about."""
        section = self.get(name, {}) or {}
        known = settings_cls.__dataclass_fields__.keys()
        unknown = set(section) - set(known)
        if unknown:
            logger.warning(f"Ignoring unknown keys in '{name}' section: {sorted(unknown)}")
        return {key: section[key] for key in known if key in section}
