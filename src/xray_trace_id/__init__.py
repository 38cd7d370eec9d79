"""Trace identifiers for distributed tracing.

Generate, parse and render trace IDs in the ``1-<start time>-<random>`` wire
format. Parsing never fails: malformed input starts a new trace.

Example:
    >>> from xray_trace_id import TraceID
    >>> trace_id = TraceID.parse("1-5759e988-bd862e3fe1be46a994272793")
    >>> hex(trace_id.epoch_seconds)
    '0x5759e988'
    >>> str(trace_id)
    '1-5759e988-bd862e3fe1be46a994272793'
"""

import logging

from xray_trace_id.random_source import (
    RandomSource,
    SecureRandomSource,
    SeededRandomSource,
    get_random_source,
    reset_random_source,
    set_random_source,
)
from xray_trace_id.trace_id import TRACE_ID_LENGTH, TraceID, TraceIDParseError

# Records reach the host application's handlers; nothing is printed otherwise
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "TraceID",
    "TraceIDParseError",
    "TRACE_ID_LENGTH",
    "RandomSource",
    "SecureRandomSource",
    "SeededRandomSource",
    "get_random_source",
    "set_random_source",
    "reset_random_source",
]
