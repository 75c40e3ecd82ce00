#!/usr/bin/env python3
"""
Centralized logging setup with rotation and retention management
"""

import logging
import logging.handlers
import os
import glob
import re
import sys
from datetime import datetime, timedelta


class SafeTimedRotatingFileHandler(logging.handlers.TimedRotatingFileHandler):
    """
    TimedRotatingFileHandler that recovers from rotation failures.
    When doRollover() fails (e.g. OSError at midnight), the handler can end up
    with a closed stream - file stops writing while console continues.
    This subclass catches emit errors and reopens the file.
    """
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._emit_failures = 0
        self._max_emit_failures = 3

    def emit(self, record):
        try:
            super().emit(record)
            self._emit_failures = 0
        except (OSError, IOError) as e:
            self._emit_failures += 1
            if self._emit_failures <= self._max_emit_failures:
                try:
                    if self.stream:
                        self.stream.close()
                        self.stream = None
                    self.stream = self._open()
                    super().emit(record)
                    self._emit_failures = 0
                except Exception:
                    if self._emit_failures == 1:
                        sys.stderr.write(f"Vodarr log file handler error (will retry): {e}\n")
                    self.handleError(record)
            else:
                self.handleError(record)


class VodarrLogger:
    """Centralized logger setup for Vodarr with rotation and retention"""

    _configured = False

    @classmethod
    def setup_logging(cls, config, force: bool = False) -> None:
        """
        Setup application-wide logging with rotation and retention

        Args:
            config: Object with LOG_LEVEL, LOG_FILE and LOG_RETENTION_DAYS attributes
            force: Reconfigure even if logging was already set up
        """
        if cls._configured and not force:
            return

        # Clear any existing handlers
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        # Setup formatters
        detailed_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

        # Get the configured log level
        config_level = getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO)

        # File logging is optional; an empty LOG_FILE means console only
        if config.LOG_FILE:
            log_dir = os.path.dirname(config.LOG_FILE)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)

            file_handler = SafeTimedRotatingFileHandler(
                filename=config.LOG_FILE,
                when='midnight',
                interval=1,
                backupCount=config.LOG_RETENTION_DAYS,
                encoding='utf-8'
            )
            # Custom naming for rotated files: vodarr.log-20250903
            file_handler.suffix = '-%Y%m%d'
            file_handler.extMatch = re.compile(r"^\d{8}$")
            file_handler.setFormatter(detailed_formatter)
            file_handler.setLevel(config_level)
            root_logger.addHandler(file_handler)

        # Setup console handler
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(console_formatter)
        console_handler.setLevel(config_level)

        # Configure root logger
        root_logger.setLevel(logging.DEBUG)  # Root accepts all levels, handlers filter
        root_logger.addHandler(console_handler)

        # aiohttp is chatty at DEBUG; only its warnings are useful here
        for noisy in ('aiohttp.client', 'aiohttp.internal', 'asyncio'):
            logging.getLogger(noisy).setLevel(logging.WARNING)

        if config.LOG_FILE:
            cls._cleanup_old_logs(config)

        cls._configured = True

        # Log startup message
        logger = logging.getLogger('vodarr')
        logger.info(f"Logging configured - Level: {config.LOG_LEVEL}, Retention: {config.LOG_RETENTION_DAYS} days")
        logger.debug("Debug logging is enabled")

    @classmethod
    def _cleanup_old_logs(cls, config) -> None:
        """Clean up log files older than retention period"""
        try:
            log_dir = os.path.dirname(config.LOG_FILE) or '.'
            base_name = os.path.basename(config.LOG_FILE)

            # Find rotated log files (vodarr.log-20250903 pattern)
            pattern = f"{base_name}-*"
            log_files = glob.glob(os.path.join(log_dir, pattern))

            # Calculate cutoff date
            cutoff_date = datetime.now() - timedelta(days=config.LOG_RETENTION_DAYS)

            files_removed = 0
            for log_file in log_files:
                try:
                    file_mtime = datetime.fromtimestamp(os.path.getmtime(log_file))

                    if file_mtime < cutoff_date:
                        os.remove(log_file)
                        files_removed += 1

                except (OSError, ValueError):
                    # Skip files we can't process
                    continue

            if files_removed > 0:
                logger = logging.getLogger('vodarr.logging')
                logger.debug(f"Cleaned up {files_removed} old log files")

        except OSError as e:
            # Don't let log cleanup break the application
            logger = logging.getLogger('vodarr.logging')
            logger.warning(f"Error during log cleanup: {e}")

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get a logger with the specified name"""
        if not cls._configured:
            raise RuntimeError("Logging not configured. Call setup_logging() first.")

        return logging.getLogger(name)


class LoggingConfig:
    """Adapter exposing the logging keys of a ConfigService as attributes"""

    def __init__(self, config_service):
        self.LOG_LEVEL = str(config_service.get('LOG_LEVEL', 'INFO')).upper()
        self.LOG_FILE = config_service.get('LOG_FILE', '')
        self.LOG_RETENTION_DAYS = config_service.get_int('LOG_RETENTION_DAYS', 7)


def setup_application_logging(config, force: bool = False) -> None:
    """Convenience function to setup logging for the entire application"""
    VodarrLogger.setup_logging(config, force=force)


def get_logger(name: str) -> logging.Logger:
    """Convenience function to get a logger"""
    return VodarrLogger.get_logger(name)
