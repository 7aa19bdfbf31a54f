# arithma_tech/utils/logger.py

import logging
import logging.handlers
from pathlib import Path

DEFAULT_LOG_FILE_NAME = 'arithma_tech.log'


class LoggerManager:
    """
    Configures the application-wide logging system.

    Two handlers are attached to the root logger:
    1. Console Handler: INFO and above, short timestamped lines.
    2. Rotating File Handler: DEBUG and above, with module and line details.
       The file rotates at 5MB and keeps five backups.
    """

    def __init__(self, log_file_path: Path | None = None, log_level=logging.DEBUG):
        """
        Args:
            log_file_path: Where to write the log file. Defaults to the project root.
            log_level: The base logging level to capture (e.g., DEBUG, INFO).
        """
        if log_file_path is None:
            log_file_path = Path(__file__).resolve().parents[2] / DEFAULT_LOG_FILE_NAME
        self.log_file_path = Path(log_file_path)
        self.log_level = log_level
        self.root_logger = logging.getLogger()

    def setup(self) -> bool:
        """
        Configures and attaches handlers to the root logger.

        Returns:
            False if logging was already configured and nothing was changed.
        """
        # Never stack a second set of handlers on top of an existing configuration.
        if self.root_logger.hasHandlers():
            return False

        self.root_logger.setLevel(self.log_level)
        self.root_logger.addHandler(self._create_console_handler())

        try:
            self.root_logger.addHandler(self._create_file_handler())
        except OSError as e:
            logging.warning(f"File logging disabled, could not open '{self.log_file_path}': {e}")

        logging.info("Logging configured successfully.")
        return True

    def _create_console_handler(self) -> logging.StreamHandler:
        """Creates a handler for logging messages to the console."""
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)
        formatter = logging.Formatter(
            '%(asctime)s - [%(levelname)s] - %(message)s',
            datefmt='%H:%M:%S'
        )
        handler.setFormatter(formatter)
        return handler

    def _create_file_handler(self) -> logging.handlers.RotatingFileHandler:
        """Creates a rotating file handler for persistent logging."""
        handler = logging.handlers.RotatingFileHandler(
            self.log_file_path, maxBytes=5*1024*1024, backupCount=5, encoding='utf-8'
        )
        handler.setLevel(logging.DEBUG)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - [%(levelname)s] - %(filename)s:%(lineno)d - %(message)s'
        )
        handler.setFormatter(formatter)
        return handler


def setup_logging(log_file_path: Path | None = None) -> bool:
    """Initializes and configures the application-wide logging system."""
    manager = LoggerManager(log_file_path)
    return manager.setup()
