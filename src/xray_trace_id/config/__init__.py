"""Configuration for xray-trace-id, validated with pydantic-settings."""

from xray_trace_id.config.env_loader import load_env_files
from xray_trace_id.config.settings import AppConfig, get_settings, load_app_config

__all__ = [
    "AppConfig",
    "get_settings",
    "load_app_config",
    "load_env_files",
]
