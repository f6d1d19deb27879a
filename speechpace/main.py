"""Main application entry point for SpeechPace."""

import sys
import argparse
import logging
from pathlib import Path
from typing import Optional

from speechpace.audio.permissions import DevicePresencePermission
from speechpace.estimation.haptics import LoggingHapticActuator, TerminalBellActuator
from speechpace.estimation.publisher import MonitorStatePublisher
from speechpace.services.monitoring_session import MonitoringSession
from speechpace.ui.monitor_screen import MonitorScreen

from .config import SpeechPaceConfig

logger = logging.getLogger(__name__)


class Server:

    def __init__(self, config_path: Optional[str], log_level: Optional[str] = None):
        # Load configuration
        self.config = SpeechPaceConfig(config_path)
        # Set up logging (command line overrides config)
        level = log_level or self.config.get('logging.level', 'INFO')
        setup_logging(self.config, level)

    def init(self, silent: bool = False):
        logger.info("Initializing services...")

        audio = self.config.audio_settings()
        logger.info(f"Audio settings: {audio.sample_rate}Hz, {audio.chunk_size} samples/chunk")
        logger.info(f"Buffers per second: {audio.sample_rate / audio.chunk_size:.1f}")

        self.screen = MonitorScreen()
        actuator = LoggingHapticActuator() if silent else TerminalBellActuator(self.screen.console)
        self.session = MonitoringSession(
            config=self.config,
            actuator=actuator,
            permission_provider=DevicePresencePermission(),
            publisher=MonitorStatePublisher(),
        )
        self.screen.subscribe()

    def run(self, duration: int):
        try:
            self.session.start(blocking=True)
            self.screen.run(duration)
        except Exception as e:
            logger.error(f"Error in run: {e}", exc_info=True)
        finally:
            self.cleanup()

    def cleanup(self):
        self.session.shutdown()
        self.screen.drain()
        self.screen.unsubscribe()


def setup_logging(config, level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    log_file_path = config.get('logging.file_path', 'data/logs/speechpace.log')
    console_output = config.get('logging.console_output', True)

    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    file_handler.setFormatter(file_formatter)
    handlers.append(file_handler)

    # Console handler - only if enabled in config
    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.WARNING)  # Only show warnings and above on console
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    logger = logging.getLogger(__name__)
    logger.info("="*50)
    logger.info("SpeechPace application starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("="*50)


def main() -> None:
    """Main entry point for SpeechPace application."""
    parser = argparse.ArgumentParser(
        description="SpeechPace - real-time speaking rate monitor"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: built-in settings)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: from config, INFO)"
    )

    parser.add_argument(
        "--duration",
        type=int,
        default=0,
        help="Seconds to monitor before exiting (default: 0, until Ctrl-C)"
    )

    parser.add_argument(
        "--silent",
        action="store_true",
        help="Log alerts instead of ringing the terminal bell"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="SpeechPace v0.1.0"
    )

    args = parser.parse_args()

    try:
        server = Server(args.config, args.log_level)
        server.init(silent=args.silent)
    except (FileNotFoundError, ValueError) as e:
        print(f"Configuration error: {e}")
        sys.exit(1)

    try:
        server.run(args.duration)
    except KeyboardInterrupt:
        server.cleanup()
        print("\nGoodbye!")


if __name__ == "__main__":
    main()
