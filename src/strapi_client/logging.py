"""Structured logging configuration.

Every module of the package logs through ``structlog.get_logger()``. Nothing
is configured on import; applications call :func:`configure_logging` to have
the client's events rendered.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, MutableMapping, TextIO

import structlog

REDACTED = "[redacted]"

# Event keys whose values are credentials.
SECRET_KEYS = frozenset({"authorization", "jwt", "password"})


def redact_secrets(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Replace credential values so they never reach the rendered output."""
    for key in event_dict:
        if key.lower() in SECRET_KEYS:
            event_dict[key] = REDACTED
    return event_dict


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown logging level: {level!r}")
    return resolved


def configure_logging(
    level: int | str = logging.INFO,
    output: TextIO = sys.stderr,
    json_format: bool = True,
) -> None:
    """Configure structlog to render the client's events.

    Args:
        level: Minimum level, as a number or a name such as ``"debug"``.
        output: Stream the events are written to.
        json_format: Render JSON lines instead of console key/value output.

    Raises:
        ValueError: ``level`` is not a known level name.
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )
