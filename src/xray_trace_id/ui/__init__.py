"""Command-line interface for xray-trace-id."""
