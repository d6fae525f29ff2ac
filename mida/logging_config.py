"""
Logging configuration for Mida.

Uses structlog for structured logging with:
- Console output (always enabled)
- Optional file output with weekly rotation
- JSON formatting (default) or human-readable console formatting

Log rotation: Weekly with 52 weeks (1 year) retention, gzip compression.

The library never configures logging on import. Applications call
configure_logging() once at startup; until then structlog uses its defaults.
"""
import gzip
import logging
import logging.handlers
import shutil
import sys
from pathlib import Path
from typing import Any, List, Optional

import structlog
from structlog.types import EventDict

from mida.config import get_settings


def add_log_level(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add log level to the event dict.
    """
    if method_name == "warn":
        method_name = "warning"
    event_dict["level"] = method_name.upper()
    return event_dict


def _get_rotated_filename(default_name: str) -> str:
    """
    Custom namer for rotated log files.
    Adds .gz extension for compression.

    Example: mida.log.2025-11-28 -> mida.log.2025-11-28.gz
    """
    return default_name + ".gz"


def _compress_rotated_file(source: str, dest: str) -> None:
    """
    Compress rotated log files with gzip.

    Args:
        source: Source log file path
        dest: Destination compressed file path (with .gz extension)
    """
    with open(source, 'rb') as f_in:
        with gzip.open(dest, 'wb') as f_out:
            shutil.copyfileobj(f_in, f_out)

    # Remove original uncompressed file
    Path(source).unlink()


def _build_file_handler(log_file: Path, level: int) -> logging.Handler:
    """Weekly rotating file handler (W0 = Monday, 52 backups, gzip)."""
    log_file.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.handlers.TimedRotatingFileHandler(
        filename=str(log_file),
        when="W0",
        interval=1,
        backupCount=52,
        encoding="utf-8",
        utc=True
        )
    file_handler.setLevel(level)
    file_handler.rotator = _compress_rotated_file
    file_handler.namer = _get_rotated_filename
    return file_handler


def configure_logging(
    log_level: Optional[str] = None,
    json_output: Optional[bool] = None,
    log_file: Optional[Path] = None,
    ) -> None:
    """
    Configure structured logging for the application.

    Arguments left as None are read from Settings (MIDA_LOG_LEVEL,
    MIDA_LOG_JSON, MIDA_LOG_FILE).

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render events as JSON (True) or for the console (False)
        log_file: Path of the rotating log file, None disables file logging
    """
    settings = get_settings()
    if log_level is None:
        log_level = settings.LOG_LEVEL
    if json_output is None:
        json_output = settings.LOG_JSON
    if log_file is None:
        log_file = settings.LOG_FILE

    # Convert string level to logging constant
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    handlers: List[logging.Handler] = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    handlers.append(console_handler)

    if log_file is not None:
        handlers.append(_build_file_handler(Path(log_file), numeric_level))

    logging.basicConfig(
        format="%(message)s",
        handlers=handlers,
        level=numeric_level,
        force=True
        )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        ]

    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
            ]
    else:
        # ConsoleRenderer formats exceptions itself
        processors += [
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=False),
            ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
        )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance (structured logger).

    Args:
        name: Logger name (typically __name__)

    Returns:
        structlog.stdlib.BoundLogger: Configured logger

    Usage:
        logger = get_logger(__name__)
        logger.error("Value cannot be converted to decimal", value="abc")
    """
    return structlog.get_logger(name)
