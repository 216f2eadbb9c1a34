"""Logging configuration for the escape room."""

import hashlib
import sys
from enum import Enum
from pathlib import Path
from typing import Any, TextIO

import structlog

_LEVELS = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}


def hash_fingerprint_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Replace player certificate fingerprints with a short hash."""
    fp = event_dict.pop("fingerprint", None)
    if fp and fp != "unknown":
        event_dict["fingerprint_hash"] = hashlib.sha256(fp.encode()).hexdigest()[:12]
    return event_dict


def enum_value_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Render enum members (actions, phases) by their value."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
    return event_dict


def _open_output(log_file: Path | None) -> TextIO:
    if log_file:
        return open(log_file, "a")
    return sys.stdout


def configure_logging(
    log_level: str = "INFO",
    log_file: Path | None = None,
    json_logs: bool = False,
    hash_fingerprints: bool = True,
) -> None:
    """Configure structured logging for the application."""
    output_stream = _open_output(log_file)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(
            fmt="iso" if json_logs else "%Y-%m-%d %H:%M:%S"
        ),
        enum_value_processor,
    ]

    if hash_fingerprints:
        processors.append(hash_fingerprint_processor)

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=output_stream.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            _LEVELS.get(log_level.upper(), 20)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output_stream),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance for a module."""
    return structlog.get_logger(name)
