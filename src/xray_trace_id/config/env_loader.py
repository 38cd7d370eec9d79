"""Priority-based .env file loading for the CLI."""

import os
from pathlib import Path

from dotenv import load_dotenv

from xray_trace_id.telemetry import ENV_FILES_LOADED, get_logger

log = get_logger(__name__)


def load_env_files(directory: Path) -> list[Path]:
    """Load .env files from ``directory``, most specific first.

    With ``APP_ENV=<env>`` the order is `.env.<env>.local`, `.env.<env>`,
    `.env.local`, `.env`. A variable keeps the first value seen, and variables
    already in the process environment are never overridden.

    Returns:
        The files that were loaded.
    """
    env_name = os.getenv("APP_ENV", "development").lower()
    candidates = [
        directory / f".env.{env_name}.local",
        directory / f".env.{env_name}",
        directory / ".env.local",
        directory / ".env",
    ]

    loaded = [path for path in candidates if path.is_file() and load_dotenv(path, override=False)]
    if loaded:
        log.info(ENV_FILES_LOADED, environment=env_name, files=[p.name for p in loaded])
    return loaded
