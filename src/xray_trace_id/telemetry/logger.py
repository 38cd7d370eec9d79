"""Structured logging using structlog.

Library modules log through structlog loggers wrapped around stdlib loggers
under ``xray_trace_id``. Event keys travel as record extras, so the host
application's logging configuration alone decides where they go.
``configure_logging`` installs a stderr handler and is only called by the CLI.
"""

import logging
import sys
from typing import Any

import structlog


def _add_component(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Add the last dotted part of the logger name as ``component``."""
    # "xray_trace_id.random_source" -> "random_source"
    event_dict["component"] = event_dict.get("logger", "").split(".")[-1] or "unknown"
    return event_dict


def configure_logging(log_level: str | None = None, log_format: str | None = None) -> None:
    """Send log records to stderr, rendered by structlog.

    Args:
        log_level: Level name; defaults to the configured ``log_level``.
        log_format: "console" or "json"; defaults to the configured ``log_format``.
    """
    if log_level is None or log_format is None:
        from xray_trace_id.config.settings import get_settings  # noqa: PLC0415

        settings = get_settings()
        log_level = log_level or settings.log_level
        log_format = log_format or settings.log_format

    renderer: Any
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.ExtraAdder(),
                structlog.processors.TimeStamper(fmt="iso", utc=True),
                _add_component,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level, logging.INFO))


def get_logger(name: str) -> Any:  # Returns structlog.stdlib.BoundLogger
    """Get a structured logger backed by the stdlib logger ``name``.

    Nothing is configured as a side effect; records are filtered and handled
    by whatever logging setup the process has.

    Example:
        >>> from xray_trace_id.telemetry import get_logger
        >>> log = get_logger(__name__)
        >>> log.debug("trace_id_parse_fallback", reason="wrong_length")
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.render_to_log_kwargs,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
    )
