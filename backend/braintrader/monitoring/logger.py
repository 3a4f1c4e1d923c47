"""
Logging Module for Braintrader

This module provides a centralized logging setup: a console handler on the
root logger plus an optional rotating file handler. Application modules keep
using ``logging.getLogger(__name__)``.
"""

import os
import sys
import logging
import threading
from logging.handlers import RotatingFileHandler


class LoggerFactory:
    """Factory class to configure the root logger and hand out named loggers."""

    _instance = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls):
        """Get singleton instance of LoggerFactory."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def __init__(self):
        """Initialize the logger factory."""
        self.level = logging.INFO
        self.log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        self.date_format = "%Y-%m-%d %H:%M:%S"
        self.max_bytes = 10 * 1024 * 1024  # 10MB
        self.backup_count = 10
        self.log_path = None
        self._file_handler = None

    def configure(self, level="INFO", log_dir=None, log_file="braintrader.log", log_to_file=True):
        """
        Set up the root logger.

        Args:
            level: Log level name or number
            log_dir: Directory for the log file (created if missing)
            log_file: Log file name inside ``log_dir``
            log_to_file: Whether to add the rotating file handler

        Returns:
            The root logger
        """
        if isinstance(level, str):
            level = getattr(logging, level.upper(), logging.INFO)
        self.level = level

        root_logger = logging.getLogger()
        root_logger.setLevel(level)

        # Remove existing handlers
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
        if self._file_handler is not None:
            self._file_handler.close()
            self._file_handler = None

        formatter = logging.Formatter(self.log_format, self.date_format)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        self.log_path = None
        if log_to_file and log_dir:
            os.makedirs(log_dir, exist_ok=True)
            self.log_path = os.path.join(log_dir, log_file)
            file_handler = RotatingFileHandler(
                self.log_path,
                maxBytes=self.max_bytes,
                backupCount=self.backup_count
            )
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            self._file_handler = file_handler

        return root_logger

    def get_logger(self, name, level=None):
        """
        Get a logger with the specified name.

        Args:
            name: Logger name
            level: Optional level override for this logger

        Returns:
            logging.Logger
        """
        logger = logging.getLogger(name)
        if level is not None:
            logger.setLevel(level)
        return logger


def setup_logging(settings):
    """Configure logging from application settings"""
    return LoggerFactory.get_instance().configure(
        level=settings.log_level,
        log_dir=settings.log_dir,
        log_file=settings.log_file,
        log_to_file=settings.log_to_file,
    )
