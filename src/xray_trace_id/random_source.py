"""Random providers backing trace ID generation.

Trace IDs are created on every inbound request across many worker threads, so
the process-shared provider must be safe for concurrent use. The default
provider draws from the OS CSPRNG and holds no state. A seeded provider exists
for tests and reproducible tooling.
"""

import random
import secrets
import threading
from typing import Protocol, runtime_checkable

from xray_trace_id.telemetry import (
    RANDOM_SOURCE_INITIALIZED,
    RANDOM_SOURCE_REPLACED,
    RANDOM_SOURCE_RESET,
    SEEDED_RANDOM_SOURCE_ENABLED,
    get_logger,
)

log = get_logger(__name__)


@runtime_checkable
class RandomSource(Protocol):
    """Provider of uniformly distributed random integers."""

    def random_bits(self, bits: int) -> int:
        """Return a non-negative integer with ``bits`` random bits."""
        ...


class SecureRandomSource:
    """Random source backed by the OS CSPRNG (``secrets``)."""

    def random_bits(self, bits: int) -> int:
        return secrets.randbits(bits)

    def __repr__(self) -> str:
        return "SecureRandomSource()"


class SeededRandomSource:
    """Deterministic random source for tests and reproducible tooling.

    Not suitable for production trace IDs: the sequence is predictable from
    the seed. Access to the underlying generator is serialized with a lock so
    concurrent callers still observe a single reproducible sequence.
    """

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._random = random.Random(seed)
        self._lock = threading.Lock()

    def random_bits(self, bits: int) -> int:
        with self._lock:
            return self._random.getrandbits(bits)

    def __repr__(self) -> str:
        return f"SeededRandomSource(seed={self.seed})"


_source: RandomSource | None = None
_source_lock = threading.Lock()


def _default_source() -> RandomSource:
    from xray_trace_id.config.settings import get_settings  # noqa: PLC0415

    seed = get_settings().random_seed
    if seed is None:
        return SecureRandomSource()

    log.warning(SEEDED_RANDOM_SOURCE_ENABLED, seed=seed)
    return SeededRandomSource(seed)


def get_random_source() -> RandomSource:
    """Get the process-shared random source.

    The source is created on first use from settings (seeded when
    ``TRACEID_RANDOM_SEED`` is set, secure otherwise). Initialization happens
    exactly once even when first use is concurrent.

    Returns:
        The shared RandomSource.
    """
    global _source
    source = _source
    if source is not None:
        return source

    with _source_lock:
        if _source is None:
            _source = _default_source()
            log.debug(RANDOM_SOURCE_INITIALIZED, source=repr(_source))
        return _source


def set_random_source(source: RandomSource) -> None:
    """Install ``source`` as the process-shared random source.

    Args:
        source: Provider used by every subsequent trace ID generation that
            does not inject its own source.

    Raises:
        TypeError: If ``source`` does not implement ``random_bits``.
    """
    global _source
    if not isinstance(source, RandomSource):
        raise TypeError(f"random source must implement random_bits(), got {type(source).__name__}")

    with _source_lock:
        previous = _source
        _source = source
    log.info(RANDOM_SOURCE_REPLACED, previous=repr(previous), source=repr(source))


def reset_random_source() -> None:
    """Forget the shared random source so the next use re-creates it from settings."""
    global _source
    with _source_lock:
        _source = None
    log.debug(RANDOM_SOURCE_RESET)
