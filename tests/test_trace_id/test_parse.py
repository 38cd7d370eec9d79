"""Tests for TraceID.parse and its fallback to a new trace."""

import logging
import re
import threading

import pytest

from xray_trace_id import TraceID
from xray_trace_id.telemetry import TRACE_ID_PARSE_FALLBACK

WELL_FORMED = "1-5759e988-bd862e3fe1be46a994272793"
WIRE_FORMAT = re.compile(r"^1-[0-9a-f]{8}-[0-9a-f]{24}$")


def assert_fresh(trace_id: TraceID) -> None:
    """A fallback result is a well-formed, valid, newly started trace ID."""
    assert trace_id.is_valid()
    assert WIRE_FORMAT.match(trace_id.format())
    assert trace_id.format() != WELL_FORMED


@pytest.fixture
def debug_caplog(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Capture records from the package loggers, DEBUG and up."""
    caplog.set_level(logging.DEBUG, logger="xray_trace_id")
    return caplog


def fallbacks(caplog: pytest.LogCaptureFixture) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.getMessage() == TRACE_ID_PARSE_FALLBACK]


class TestParseValid:
    """Test parsing of well-formed trace IDs."""

    def test_parse_known_value(self) -> None:
        trace_id = TraceID.parse(WELL_FORMED)

        assert trace_id.epoch_seconds == 0x5759E988
        assert trace_id.random_value == 0xBD862E3FE1BE46A994272793
        assert trace_id.format() == WELL_FORMED

    def test_parse_ignores_surrounding_whitespace(self) -> None:
        assert TraceID.parse(f"  {WELL_FORMED}\t\n").format() == WELL_FORMED

    def test_parse_ignores_surrounding_control_characters(self) -> None:
        assert TraceID.parse("\x00" + WELL_FORMED + "\x1f\r").format() == WELL_FORMED

    def test_parse_accepts_uppercase_hex(self) -> None:
        """Test that uppercase digits parse and render lowercase."""
        assert TraceID.parse("1-5759E988-BD862E3FE1BE46A994272793").format() == WELL_FORMED

    def test_parse_ascii_bytes(self) -> None:
        assert TraceID.parse(WELL_FORMED.encode("ascii")).format() == WELL_FORMED

    def test_parse_sentinel_text(self) -> None:
        """Test that the all-zero wire form parses to the sentinel value."""
        trace_id = TraceID.parse("1-00000000-000000000000000000000000")
        assert trace_id == TraceID.invalid()

    def test_parse_max_values(self) -> None:
        trace_id = TraceID.parse("1-ffffffff-ffffffffffffffffffffffff")

        assert trace_id.epoch_seconds == 0xFFFFFFFF
        assert trace_id.random_value == (1 << 96) - 1

    def test_round_trip_of_created_ids(self) -> None:
        for _ in range(100):
            trace_id = TraceID.create()
            assert TraceID.parse(trace_id.format()) == trace_id

    def test_parse_does_not_log_for_valid_input(
        self, debug_caplog: pytest.LogCaptureFixture
    ) -> None:
        TraceID.parse(WELL_FORMED)
        assert not fallbacks(debug_caplog)


class TestParseFallback:
    """Test that malformed input starts a new trace instead of failing."""

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "garbage",
            WELL_FORMED[:-1],
            WELL_FORMED + "0",
            "1-5759e988-bd862e3fe1be46a9942727931234",
        ],
    )
    def test_wrong_length(self, text: str) -> None:
        assert_fresh(TraceID.parse(text))

    @pytest.mark.parametrize("version", ["0", "2", "a", " "])
    def test_wrong_version(self, version: str) -> None:
        assert_fresh(TraceID.parse(version + WELL_FORMED[1:]))

    @pytest.mark.parametrize(
        "text",
        [
            "1_5759e988-bd862e3fe1be46a994272793",
            "1-5759e988_bd862e3fe1be46a994272793",
            "1-5759e9880bd862e3fe1be46a99427279-",
            "1:5759e988:bd862e3fe1be46a994272793",
        ],
    )
    def test_misplaced_delimiters(self, text: str) -> None:
        assert_fresh(TraceID.parse(text))

    @pytest.mark.parametrize(
        "text",
        [
            "1-5759e98g-bd862e3fe1be46a994272793",
            "1-5759e988-bd862e3fe1be46a99427279z",
            "1--759e988-bd862e3fe1be46a994272793",
            "1-+759e988-bd862e3fe1be46a994272793",
            "1-5759_988-bd862e3fe1be46a994272793",
            "1-5759e988-0xbd862e3fe1be46a9942727",
            "1-5759 988-bd862e3fe1be46a994272793",
            "1-5759e988-bd862e3fe1be46a99427279١",
        ],
    )
    def test_non_hex_fields(self, text: str) -> None:
        assert len(text) == 35
        assert_fresh(TraceID.parse(text))

    @pytest.mark.parametrize("space", ["\u00a0", "\u2003", "\u3000", "\x7f"])
    def test_non_ascii_whitespace_is_not_trimmed(self, space: str) -> None:
        """Test that only ASCII space and control characters are trimmed."""
        assert_fresh(TraceID.parse(space + WELL_FORMED))
        assert_fresh(TraceID.parse(WELL_FORMED + space))

    @pytest.mark.parametrize("value", [None, 42, b"\xff" * 35, ["1", "-"]])
    def test_non_text_input(self, value: object) -> None:
        """Test that values that are not text still yield a trace ID."""
        assert_fresh(TraceID.parse(value))

    def test_fallback_uses_injected_random_source(self) -> None:
        class Fixed:
            def random_bits(self, bits: int) -> int:
                return 0xABC

        trace_id = TraceID.parse("garbage", random_source=Fixed())
        assert trace_id.random_value == 0xABC

    def test_fallback_never_returns_sentinel(self) -> None:
        for text in ("", "garbage", "2-00000000-000000000000000000000000"):
            assert TraceID.parse(text) is not TraceID.invalid()
            assert TraceID.parse(text).is_valid()

    def test_fallback_is_logged_with_reason(self, debug_caplog: pytest.LogCaptureFixture) -> None:
        TraceID.parse("2-5759e988-bd862e3fe1be46a994272793")

        records = fallbacks(debug_caplog)
        assert len(records) == 1
        assert records[0].reason == "wrong_version"
        assert records[0].levelno == logging.DEBUG
        assert records[0].name == "xray_trace_id.trace_id"

    @pytest.mark.parametrize(
        ("text", "reason"),
        [
            ("garbage", "wrong_length"),
            ("1-5759e988_bd862e3fe1be46a994272793", "missing_delimiter"),
            ("1-5759e98g-bd862e3fe1be46a994272793", "invalid_start_time"),
            ("1-5759e988-bd862e3fe1be46a99427279z", "invalid_random"),
            (None, "not_text"),
        ],
    )
    def test_fallback_reasons(
        self, text: object, reason: str, debug_caplog: pytest.LogCaptureFixture
    ) -> None:
        TraceID.parse(text)
        assert [r.reason for r in fallbacks(debug_caplog)] == [reason]

    def test_logged_input_is_truncated(self, debug_caplog: pytest.LogCaptureFixture) -> None:
        TraceID.parse("x" * 10_000)
        (record,) = fallbacks(debug_caplog)
        assert len(record.value) <= 64


class TestConcurrentUse:
    """Test parsing and creation from many threads."""

    def test_concurrent_create_and_parse(self) -> None:
        results: list[TraceID] = []
        lock = threading.Lock()

        def worker() -> None:
            local = [TraceID.parse(TraceID.create().format()) for _ in range(200)]
            with lock:
                results.extend(local)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 1600
        assert len(set(results)) == 1600
