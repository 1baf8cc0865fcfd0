"""
Structured logging configuration for the moulding_preview package.

Provides:
- JSON formatter for machine-readable log files
- Console formatter for human-readable output
- ``log_timing`` context manager for conversion/render timing
- Centralized logging setup

Usage:
    from moulding_preview.logging_config import setup_logging, get_logger

    setup_logging(level=logging.INFO, json_file="moulding.log.json")
    logger = get_logger(__name__)
    logger.info("Converting drawing", extra={"file": "ogee.dxf"})
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

PACKAGE_LOGGER = "moulding_preview"

# Attributes every LogRecord has; anything else came in through extra={}
_RESERVED_KEYS = frozenset({
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
    'message', 'asctime', 'taskName',
})


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_KEYS}


class JSONFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, extras."""

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.levelno >= logging.WARNING:
            entry["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        if self.include_extra:
            for key, value in _extra_fields(record).items():
                try:
                    json.dumps(value)
                    entry[key] = value
                except (TypeError, ValueError):
                    entry[key] = str(value)

        return json.dumps(entry, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Format: [TIME] LEVEL logger: message [key=value, ...]"""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True, show_extra: bool = True):
        super().__init__()
        self.use_colors = use_colors
        self.show_extra = show_extra

    def format(self, record: logging.LogRecord) -> str:
        time_str = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        level = record.levelname
        if self.use_colors and level in self.COLORS:
            level_str = f"{self.COLORS[level]}{level:8}{self.RESET}"
        else:
            level_str = f"{level:8}"

        name = record.name
        if name.startswith(PACKAGE_LOGGER + "."):
            name = name[len(PACKAGE_LOGGER) + 1:]

        extra_str = ""
        if self.show_extra:
            parts = []
            for key, value in _extra_fields(record).items():
                if isinstance(value, float):
                    parts.append(f"{key}={value:.3g}")
                else:
                    parts.append(f"{key}={value}")
            if parts:
                extra_str = " [" + ", ".join(parts) + "]"

        result = f"[{time_str}] {level_str} {name}: {record.getMessage()}{extra_str}"
        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)
        return result


def setup_logging(
    level: int = logging.INFO,
    json_file: Optional[Union[str, Path]] = None,
    console: bool = True,
    use_colors: bool = True,
) -> logging.Logger:
    """Configure the ``moulding_preview`` logger.

    Args:
        level: minimum log level.
        json_file: optional path for a JSON-lines log file.
        console: log to stderr.
        use_colors: ANSI colours on the console.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(ConsoleFormatter(use_colors=use_colors))
        logger.addHandler(console_handler)

    if json_file:
        json_handler = logging.FileHandler(Path(json_file), encoding='utf-8')
        json_handler.setLevel(level)
        json_handler.setFormatter(JSONFormatter())
        logger.addHandler(json_handler)

    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


@contextmanager
def log_timing(
    logger: logging.Logger,
    operation: str,
    level: int = logging.DEBUG,
    **extra_fields: Any,
) -> Iterator[Dict[str, Any]]:
    """Log start, completion time and failure of an operation.

    Example:
        with log_timing(logger, "DXF conversion", source="ogee.dxf"):
            result = convert_dxf_text(payload, profiles_dir)

    Yields:
        dict that can be filled with extra fields for the completion record
    """
    timing_info: Dict[str, Any] = {}
    start_time = time.perf_counter()
    logger.log(level, f"Starting: {operation}",
               extra={"event": "start", "operation": operation, **extra_fields})
    try:
        yield timing_info
    except Exception as e:
        elapsed = time.perf_counter() - start_time
        logger.error(f"Failed: {operation} ({elapsed:.3f}s) - {e}", extra={
            "event": "error",
            "operation": operation,
            "elapsed_seconds": elapsed,
            "error": str(e),
            **extra_fields,
        })
        raise
    elapsed = time.perf_counter() - start_time
    timing_info['elapsed_seconds'] = elapsed
    logger.log(level, f"Completed: {operation} ({elapsed:.3f}s)", extra={
        "event": "complete",
        "operation": operation,
        **extra_fields,
        **timing_info,
    })


def configure_default_logging(verbose: bool = False) -> logging.Logger:
    """INFO (or DEBUG when verbose) to the console."""
    return setup_logging(level=logging.DEBUG if verbose else logging.INFO)
