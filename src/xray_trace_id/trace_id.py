"""Trace identifiers for distributed tracing.

A trace ID names one end-to-end trace across process and service boundaries.
Its wire form is a 35 character ASCII string::

    1-5759e988-bd862e3fe1be46a994272793
    | |        |
    | |        96-bit random value, 24 lowercase hex digits
    | epoch seconds of the trace start, 8 lowercase hex digits
    version

Parsing is total: text that does not match the wire format is replaced by a
freshly generated ID, so a malformed inbound header starts a new trace instead
of failing the request.
"""

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema

from xray_trace_id.random_source import RandomSource, get_random_source
from xray_trace_id.telemetry import TRACE_ID_PARSE_FALLBACK, get_logger

log = get_logger(__name__)

VERSION = "1"
DELIMITER = "-"
TRACE_ID_LENGTH = 35

START_TIME_HEX_DIGITS = 8
RANDOM_HEX_DIGITS = 24
RANDOM_BITS = RANDOM_HEX_DIGITS * 4

_DELIMITER_INDEX_1 = 1
_DELIMITER_INDEX_2 = _DELIMITER_INDEX_1 + START_TIME_HEX_DIGITS + 1
_START_TIME_MASK = (1 << (START_TIME_HEX_DIGITS * 4)) - 1
_RANDOM_LIMIT = 1 << RANDOM_BITS
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

WIRE_PATTERN = r"^1-[0-9a-fA-F]{8}-[0-9a-fA-F]{24}$"

# ASCII space and control characters; str.strip() would also remove Unicode spaces
TRIMMED_CHARACTERS = "".join(map(chr, range(0x21)))

# Longest slice of rejected input echoed into logs
_LOGGED_INPUT_LIMIT = 64


class TraceIDParseError(ValueError):
    """Text is not a well-formed trace ID.

    Raised only inside the decoder; ``TraceID.parse`` recovers from it by
    generating a new trace ID.
    """

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason


@dataclass(frozen=True, repr=False)
class TraceID:
    """Immutable trace identifier.

    Use ``create``, ``starting_at``, ``parse`` or ``invalid`` rather than the
    field constructor, which exists for callers that already hold validated
    field values.

    Attributes:
        epoch_seconds: Trace start in seconds since the Unix epoch. Only the
            low 32 bits are carried on the wire.
        random_value: 96-bit random value unique to the trace.
    """

    epoch_seconds: int
    random_value: int

    def __post_init__(self) -> None:
        for name in ("epoch_seconds", "random_value"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an int, got {type(value).__name__}")
        if self.epoch_seconds < 0:
            raise ValueError(f"epoch_seconds must be non-negative, got {self.epoch_seconds}")
        if not 0 <= self.random_value < _RANDOM_LIMIT:
            raise ValueError(f"random_value must fit in {RANDOM_BITS} unsigned bits")

    @classmethod
    def create(cls, random_source: RandomSource | None = None) -> "TraceID":
        """Start a new trace at the current wall-clock second.

        Args:
            random_source: Provider for the random value. Defaults to the
                process-shared source.

        Returns:
            A new TraceID.
        """
        return cls.starting_at(int(time.time()), random_source=random_source)

    @classmethod
    def starting_at(
        cls, epoch_seconds: int, random_source: RandomSource | None = None
    ) -> "TraceID":
        """Start a new trace with an explicit start time.

        Args:
            epoch_seconds: Trace start in seconds since the Unix epoch.
            random_source: Provider for the random value. Defaults to the
                process-shared source.

        Returns:
            A new TraceID with a freshly drawn random value.
        """
        source = random_source if random_source is not None else get_random_source()
        return cls(epoch_seconds=epoch_seconds, random_value=source.random_bits(RANDOM_BITS))

    @classmethod
    def parse(cls, text: Any, random_source: RandomSource | None = None) -> "TraceID":
        """Parse a trace ID, starting a new trace if the text is malformed.

        Surrounding ASCII whitespace and control characters are ignored and
        hex digits may be in either case.
        ``bytes`` are decoded as ASCII. Anything that is not a well-formed
        trace ID (including non-string values) yields ``create()`` instead of
        an error.

        Args:
            text: Trace ID text, typically from a propagation header.
            random_source: Provider used if a new trace has to be started.

        Returns:
            The parsed TraceID, or a new one.
        """
        try:
            return cls._decode(text)
        except TraceIDParseError as e:
            log.debug(
                TRACE_ID_PARSE_FALLBACK,
                reason=e.reason,
                error=str(e),
                value=repr(text)[:_LOGGED_INPUT_LIMIT],
            )
            return cls.create(random_source=random_source)

    @classmethod
    def _decode(cls, text: Any) -> "TraceID":
        if isinstance(text, (bytes, bytearray)):
            try:
                text = text.decode("ascii")
            except UnicodeDecodeError as e:
                raise TraceIDParseError("not_ascii", "trace ID bytes are not ASCII") from e
        if not isinstance(text, str):
            raise TraceIDParseError("not_text", f"expected str, got {type(text).__name__}")

        text = text.strip(TRIMMED_CHARACTERS)

        if len(text) != TRACE_ID_LENGTH:
            raise TraceIDParseError(
                "wrong_length", f"expected {TRACE_ID_LENGTH} characters, got {len(text)}"
            )
        if text[0] != VERSION:
            raise TraceIDParseError("wrong_version", f"unsupported version {text[0]!r}")
        if text[_DELIMITER_INDEX_1] != DELIMITER or text[_DELIMITER_INDEX_2] != DELIMITER:
            raise TraceIDParseError("missing_delimiter", "delimiters not at positions 1 and 10")

        start_time_part = text[_DELIMITER_INDEX_1 + 1 : _DELIMITER_INDEX_2]
        random_part = text[_DELIMITER_INDEX_2 + 1 :]
        # int(x, 16) also accepts signs, underscores and 0x prefixes
        if not _HEX_DIGITS.issuperset(start_time_part):
            raise TraceIDParseError("invalid_start_time", "start time is not hexadecimal")
        if not _HEX_DIGITS.issuperset(random_part):
            raise TraceIDParseError("invalid_random", "random value is not hexadecimal")

        return cls(epoch_seconds=int(start_time_part, 16), random_value=int(random_part, 16))

    @classmethod
    def invalid(cls) -> "TraceID":
        """Return the shared "no trace" sentinel.

        Used where an ID is structurally required but no trace is active,
        for example an unsampled segment.
        """
        return _INVALID

    def is_valid(self) -> bool:
        """Whether this ID names a real trace (i.e. is not the sentinel)."""
        return self != _INVALID

    @property
    def start_datetime(self) -> datetime:
        """Trace start as a UTC datetime."""
        return datetime.fromtimestamp(self.epoch_seconds, tz=timezone.utc)

    def format(self) -> str:
        """Render the canonical 35 character wire form."""
        return (
            f"{VERSION}{DELIMITER}"
            f"{self.epoch_seconds & _START_TIME_MASK:0{START_TIME_HEX_DIGITS}x}{DELIMITER}"
            f"{self.random_value:0{RANDOM_HEX_DIGITS}x}"
        )

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"TraceID({self.format()!r})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        # Validation goes through parse, so malformed values start a new trace
        return core_schema.no_info_plain_validator_function(
            cls._coerce,
            serialization=core_schema.to_string_ser_schema(when_used="json"),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return {
            "type": "string",
            "minLength": TRACE_ID_LENGTH,
            "maxLength": TRACE_ID_LENGTH,
            "pattern": WIRE_PATTERN,
            "examples": ["1-5759e988-bd862e3fe1be46a994272793"],
        }

    @classmethod
    def _coerce(cls, value: Any) -> "TraceID":
        if isinstance(value, cls):
            return value
        return cls.parse(value)


_INVALID = TraceID(epoch_seconds=0, random_value=0)
