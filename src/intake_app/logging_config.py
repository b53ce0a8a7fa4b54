"""Logging configuration for the intake client."""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler


class ColorFormatter(logging.Formatter):
    """Color-coded formatter for console output."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'
    }

    def format(self, record):
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            # Other handlers see the same record
            record.levelname = levelname


def setup_logging(level=None, stream=None):
    """Setup logging for the Toga client and the CLI.

    Console output goes to stdout (stderr for the CLI, so command output stays
    clean). Set INTAKE_LOG_FILE to also keep a rotating log file.

    Args:
        level: Log level name overriding LOG_LEVEL
        stream: Console stream, defaults to sys.stdout
    """
    log_level_str = (level or os.getenv('LOG_LEVEL', 'INFO')).upper()
    log_level = getattr(logging, log_level_str, logging.INFO)
    stream = stream or sys.stdout

    logger = logging.getLogger()
    logger.setLevel(log_level)

    color_formatter = ColorFormatter(
        '%(asctime)s %(levelname)s %(name)-22s %(message)s'
    )
    plain_formatter = logging.Formatter(
        '%(asctime)s %(levelname)-8s %(name)-22s %(message)s'
    )

    use_colors = os.getenv('LOG_COLORS', 'true').lower() in ('true', '1', 'yes')

    console_handler = logging.StreamHandler(stream)
    console_handler.setLevel(log_level)
    if use_colors and hasattr(stream, 'isatty') and stream.isatty():
        console_handler.setFormatter(color_formatter)
    else:
        console_handler.setFormatter(plain_formatter)

    # Clear existing handlers to avoid duplicates
    logger.handlers.clear()
    logger.addHandler(console_handler)

    log_file = os.getenv('INTAKE_LOG_FILE')
    if log_file:
        log_dir = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=5*1024*1024, backupCount=3)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(plain_formatter)
        logger.addHandler(file_handler)

    # Reduce noise from libraries
    logging.getLogger('PIL').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('toga').setLevel(logging.WARNING)

    logger.info(f"Intake client logging initialized (level: {log_level_str})")

    return logger
