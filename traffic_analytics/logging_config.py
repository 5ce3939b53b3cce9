"""
Logging Configuration Module

This module provides thread-safe logging configuration for the analytics
server: queue-based logging to the console plus combined, error and access
log files, and silencing of noisy third-party libraries.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from queue import Queue
from typing import List, Optional, Union


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
COMBINED_LOG_NAME = "combined.log"
ERROR_LOG_NAME = "error.log"
ACCESS_LOG_NAME = "access.log"
ACCESS_LOGGER_NAME = "traffic_analytics.access"


class ThreadSafeLoggingConfig:
    """Thread-safe logging configuration with queue-based logging."""

    def __init__(self):
        self._log_listener: Optional[logging.handlers.QueueListener] = None
        self._log_queue: Optional[Queue] = None

    def setup_logging(self, debug: bool = False, log_dir: Optional[Union[str, Path]] = None,
                      level: Union[int, str] = logging.INFO) -> None:
        """
        Configure thread-safe logging for the server and silence chatty libraries.

        Request threads write to a queue and a single listener thread drains it,
        so lines from concurrent requests never interleave.

        Args:
            debug: Whether to enable debug logging
            log_dir: Directory for combined.log, error.log and access.log;
                console only if None
            level: Root level when not in debug mode
        """
        if self._log_listener:
            self.stop()

        self._log_queue = Queue()
        queue_handler = logging.handlers.QueueHandler(self._log_queue)

        formatter = logging.Formatter(LOG_FORMAT)
        handlers: List[logging.Handler] = []

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

        if log_dir is not None:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)

            combined_handler = logging.FileHandler(log_path / COMBINED_LOG_NAME, encoding="utf-8")
            combined_handler.setFormatter(formatter)
            handlers.append(combined_handler)

            error_handler = logging.FileHandler(log_path / ERROR_LOG_NAME, encoding="utf-8")
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(formatter)
            handlers.append(error_handler)

            # Bare combined-format lines, one per request.
            access_handler = logging.FileHandler(log_path / ACCESS_LOG_NAME, encoding="utf-8")
            access_handler.addFilter(logging.Filter(ACCESS_LOGGER_NAME))
            access_handler.setFormatter(logging.Formatter("%(message)s"))
            handlers.append(access_handler)

        self._log_listener = logging.handlers.QueueListener(
            self._log_queue, *handlers, respect_handler_level=True
        )
        self._log_listener.start()

        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.addHandler(queue_handler)
        root_logger.setLevel(logging.DEBUG if debug else level)

        if not debug:
            self._silence_noisy_libraries()

    def _silence_noisy_libraries(self) -> None:
        """Silence noisy third-party libraries."""
        # werkzeug's request lines duplicate the access log.
        noisy_loggers = [
            "werkzeug",
            "urllib3",
            "asyncio",
        ]

        for name in noisy_loggers:
            logging.getLogger(name).setLevel(logging.WARNING)

    def stop(self) -> None:
        """Stop the logging listener and cleanup."""
        if self._log_listener:
            self._log_listener.stop()
            self._log_listener = None
        if self._log_queue:
            self._log_queue = None


# Global logging configuration instance
logging_config = ThreadSafeLoggingConfig()


def setup_logging(debug: bool = False, log_dir: Optional[Union[str, Path]] = None,
                  level: Union[int, str] = logging.INFO) -> None:
    """
    Setup thread-safe logging configuration.

    Args:
        debug: Whether to enable debug logging
        log_dir: Directory for log files
        level: Root level when not in debug mode
    """
    logging_config.setup_logging(debug, log_dir, level)


def stop_logging() -> None:
    """Stop the logging listener and cleanup."""
    logging_config.stop()


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
