"""
Logging Configuration
=====================

structlog setup shared by the CLI and the API.

Log output goes to stderr so that stdout carries only citation text (or
JSON with ``--json``).

Example:
    >>> from linkcite.log_config import configure_logging
    >>> configure_logging("DEBUG")
    >>> structlog.get_logger().debug("Attributes resolved", resolved=["title"])
"""

import logging
import sys
from typing import List, Union

import structlog


def _level_number(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    number = logging.getLevelName(str(level).upper())
    if not isinstance(number, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return number


def configure_logging(level: Union[str, int] = "INFO", json_output: bool = False) -> None:
    """
    Configure structlog for the process.

    Args:
        level: Minimum level (name or number); lower events are dropped
        json_output: Render events as JSON lines instead of console text

    Raises:
        ValueError: If the level name is unknown
    """
    number = _level_number(level)

    processors: List = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(number),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
    # Also redirect stdlib logging to stderr (uvicorn and friends use logging directly)
    logging.basicConfig(stream=sys.stderr, level=number)


__all__ = ["configure_logging"]
