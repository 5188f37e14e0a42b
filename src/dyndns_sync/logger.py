#!/usr/bin/env python3
"""
Logger Module

Logging setup with consistent color formatting, daemon mode (no console
output) and optional systemd journal integration.

Created: 2026-10-19
License: MIT
"""

################################################################################
# IMPORTS & DEPENDENCIES
################################################################################

import os
import sys
import logging
import threading
from typing import Optional, Dict, Any

from .colors import LOG_COLORS, LOG_SYMBOLS

# Root of the package logger tree; module loggers are children of it
PACKAGE_LOGGER_NAME = "dyndns_sync"

################################################################################
# FORMATTER CLASSES - ANSI Color Formatting
################################################################################

class ColoredFormatter(logging.Formatter):
    """Formatter with ANSI colors and level symbols."""

    COLORS = LOG_COLORS
    SYMBOLS = LOG_SYMBOLS

    def __init__(self, include_timestamp: bool = False, use_colors: bool = True) -> None:
        """Initialize formatter with optional timestamp."""
        self.include_timestamp = include_timestamp
        self.use_colors = use_colors
        format_string = '%(asctime)s - %(message)s' if include_timestamp else '%(message)s'
        super().__init__(format_string, datefmt='%H:%M:%S')

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors and symbols."""
        level_name = record.levelname
        symbol = self.SYMBOLS.get(level_name, '')
        message = record.getMessage()

        if symbol:
            message = f"{symbol} {message}"
        if self.use_colors:
            message = f"{self.COLORS.get(level_name, '')}{message}{self.COLORS['RESET']}"

        # Work on a copy so other handlers see the untouched record
        record = logging.makeLogRecord(record.__dict__)
        record.msg = message
        record.args = None

        return super().format(record)


class LoggerManager:
    """Logger factory with console, daemon mode and systemd journal support."""

    _loggers: Dict[str, logging.Logger] = {}
    _lock = threading.Lock()

    ################################################################################
    # PUBLIC CLASS METHODS - Logger Factory
    ################################################################################

    @classmethod
    def get_logger(cls, name: str = PACKAGE_LOGGER_NAME, **kwargs: Any) -> logging.Logger:
        """Get or create logger instance (thread-safe). Use daemon_mode=True to skip console output."""
        with cls._lock:
            if name not in cls._loggers:
                cls._loggers[name] = cls._create_logger(name, **kwargs)
            return cls._loggers[name]

    @classmethod
    def set_level(cls, level: int, name: str = PACKAGE_LOGGER_NAME) -> None:
        """Change level of an existing logger and all of its handlers."""
        logger = logging.getLogger(name)
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)

    @staticmethod
    def resolve_level(level_name: Optional[str]) -> int:
        """Map a level name to a logging constant. Falls back to DEBUG/VERBOSE env vars, then INFO."""
        if level_name:
            level = logging.getLevelName(str(level_name).upper())
            if isinstance(level, int):
                return level
        if os.getenv('DEBUG', '0') == '1':
            return logging.DEBUG
        return logging.INFO

    ################################################################################
    # PRIVATE CLASS METHODS - Logger Configuration
    ################################################################################

    @classmethod
    def _create_logger(cls, name: str, **kwargs: Any) -> logging.Logger:
        """Create and configure new logger instance."""
        daemon_mode = kwargs.get('daemon_mode', False)
        use_colors = kwargs.get('use_colors', sys.stdout.isatty())
        log_level = kwargs.get('level', None)

        if log_level is None:
            log_level = cls.resolve_level(None)

        logger = logging.getLogger(name)
        logger.setLevel(log_level)
        logger.propagate = False

        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

        if not daemon_mode:
            cls._setup_console_handler(logger, log_level, use_colors)

        cls._setup_journal_handler(logger, log_level)
        cls._setup_live_logging()

        return logger

    @classmethod
    def _setup_console_handler(cls, logger: logging.Logger, level: int, use_colors: bool) -> None:
        """Setup console handler with ANSI colors."""
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(ColoredFormatter(include_timestamp=True, use_colors=use_colors))
        logger.addHandler(console_handler)

    @classmethod
    def _setup_journal_handler(cls, logger: logging.Logger, level: int) -> None:
        """Setup systemd journal handler if systemd-python is installed."""
        try:
            from systemd import journal
        except ImportError:
            return

        from . import __syslog_identifier__
        identifier = os.environ.get('SYSLOG_IDENTIFIER') or __syslog_identifier__

        journal_handler = journal.JournalHandler(SYSLOG_IDENTIFIER=identifier)
        journal_handler.setLevel(level)
        journal_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        logger.addHandler(journal_handler)

    @classmethod
    def _setup_live_logging(cls) -> None:
        """Line-buffer stdout/stderr so log lines show up immediately under systemd."""
        for stream in (sys.stdout, sys.stderr):
            reconfigure = getattr(stream, 'reconfigure', None)
            if reconfigure is not None:
                reconfigure(line_buffering=True)


# Add SUCCESS log level
SUCCESS_LEVEL = 25  # Between INFO (20) and WARNING (30)
logging.addLevelName(SUCCESS_LEVEL, 'SUCCESS')
