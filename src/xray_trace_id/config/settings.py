"""Application configuration settings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from xray_trace_id.config.validators import validate_log_format, validate_log_level
from xray_trace_id.telemetry import APP_CONFIG_LOAD_FAILED, APP_CONFIG_LOADED, get_logger

log = get_logger(__name__)


class AppConfig(BaseSettings):
    """Configuration read from ``TRACEID_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="TRACEID_", case_sensitive=False, extra="ignore")

    log_level: str = Field(
        default="INFO", description="CLI log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: str = Field(default="console", description="CLI log format (json or console)")
    random_seed: int | None = Field(
        default=None,
        ge=0,
        description=(
            "Seed for a deterministic random source. Only for tests and reproducible "
            "tooling; leave unset in production so trace IDs come from the OS CSPRNG."
        ),
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        return validate_log_level(v)

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        return validate_log_format(v)


_settings: AppConfig | None = None


def load_app_config() -> AppConfig:
    """Load and validate configuration from the process environment.

    Raises:
        ValidationError: If configuration validation fails.
    """
    try:
        config = AppConfig()
    except Exception as e:
        log.error(APP_CONFIG_LOAD_FAILED, error=str(e), error_type=type(e).__name__)
        raise
    log.debug(
        APP_CONFIG_LOADED,
        log_level=config.log_level,
        log_format=config.log_format,
        seeded=config.random_seed is not None,
    )
    return config


def get_settings() -> AppConfig:
    """Get the application settings singleton."""
    global _settings
    if _settings is None:
        _settings = load_app_config()
    return _settings
