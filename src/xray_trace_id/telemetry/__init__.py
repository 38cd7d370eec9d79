"""Telemetry: structured logging and semantic event constants."""

from xray_trace_id.telemetry.events import (
    APP_CONFIG_LOAD_FAILED,
    APP_CONFIG_LOADED,
    ENV_FILES_LOADED,
    RANDOM_SOURCE_INITIALIZED,
    RANDOM_SOURCE_REPLACED,
    RANDOM_SOURCE_RESET,
    SEEDED_RANDOM_SOURCE_ENABLED,
    TRACE_ID_PARSE_FALLBACK,
)
from xray_trace_id.telemetry.logger import configure_logging, get_logger

__all__ = [
    "get_logger",
    "configure_logging",
    "TRACE_ID_PARSE_FALLBACK",
    "RANDOM_SOURCE_INITIALIZED",
    "RANDOM_SOURCE_REPLACED",
    "RANDOM_SOURCE_RESET",
    "SEEDED_RANDOM_SOURCE_ENABLED",
    "APP_CONFIG_LOADED",
    "APP_CONFIG_LOAD_FAILED",
    "ENV_FILES_LOADED",
]
