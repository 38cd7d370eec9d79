"""Semantic event constants for structured logging."""

# Trace ID events
TRACE_ID_PARSE_FALLBACK = "trace_id_parse_fallback"

# Random source events
RANDOM_SOURCE_INITIALIZED = "random_source_initialized"
RANDOM_SOURCE_REPLACED = "random_source_replaced"
RANDOM_SOURCE_RESET = "random_source_reset"
SEEDED_RANDOM_SOURCE_ENABLED = "seeded_random_source_enabled"

# Configuration events
APP_CONFIG_LOADED = "app_config_loaded"
APP_CONFIG_LOAD_FAILED = "app_config_load_failed"
ENV_FILES_LOADED = "env_files_loaded"
