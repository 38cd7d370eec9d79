"""Shared pytest fixtures."""

from collections.abc import Iterator

import pytest

import xray_trace_id.config.settings as settings_module
from xray_trace_id.random_source import reset_random_source


@pytest.fixture(autouse=True)
def _isolate_process_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Give every test a fresh settings singleton and shared random source."""
    monkeypatch.delenv("TRACEID_RANDOM_SEED", raising=False)
    monkeypatch.setattr(settings_module, "_settings", None)
    reset_random_source()
    yield
    reset_random_source()
