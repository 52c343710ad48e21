"""Test suite for structured logging configuration.

Validate that the logging system selects the right renderer per environment
and exposes working context variable helpers.
"""
import structlog

from app.config import Settings
from app.shellprobe.core.logging_config import (
    PROBE_LOGGER_NAME,
    ProbeOutputTruncator,
    bind_contextvars,
    clear_contextvars,
    get_common_processors,
    get_logging_config,
)


def test_config_generates_json_in_production():
    """Verify production environment uses JSON renderer for log shippers."""
    settings = Settings(ENVIRONMENT="production", _env_file=None)

    config = get_logging_config(settings)

    processor = config["formatters"]["default"]["processor"]
    assert isinstance(processor, structlog.processors.JSONRenderer)


def test_config_generates_console_in_development():
    settings = Settings(ENVIRONMENT="development", _env_file=None)
    config = get_logging_config(settings)

    processor = config["formatters"]["default"]["processor"]
    assert isinstance(processor, structlog.dev.ConsoleRenderer)


def test_log_level_and_noisy_modules_applied():
    settings = Settings(LOG_LEVEL="warning", LOGGING_NOISY_MODULES=["noisy.lib"], _env_file=None)

    config = get_logging_config(settings)

    assert config["loggers"][""]["level"] == "WARNING"
    assert config["handlers"]["console"]["level"] == "WARNING"
    assert config["loggers"]["noisy.lib"] == {"level": "WARNING", "propagate": False}


def test_common_processors_include_context_merge():
    """Verify merge_contextvars is present so request IDs reach every log line."""
    processors = get_common_processors()
    assert structlog.contextvars.merge_contextvars in processors


def test_contextvars_binding_and_clearing():
    bind_contextvars(request_id="test-123")
    ctx = structlog.contextvars.get_contextvars()
    assert ctx["request_id"] == "test-123"

    clear_contextvars()
    ctx = structlog.contextvars.get_contextvars()
    assert "request_id" not in ctx


def test_probe_logger_level_only_set_when_configured():
    """Verify PROBE_LOG_LEVEL adds a dedicated level for the probe runner logger."""
    default = get_logging_config(Settings(_env_file=None))
    quiet = get_logging_config(Settings(PROBE_LOG_LEVEL="error", _env_file=None))

    assert PROBE_LOGGER_NAME not in default["loggers"]
    assert quiet["loggers"][PROBE_LOGGER_NAME] == {"level": "ERROR"}


def test_long_probe_output_is_truncated_in_log_events():
    truncate = ProbeOutputTruncator(limit=5)

    event = truncate(None, "warning", {"event": "probe_failed", "output": "abcdefghij"})

    assert event["output"] == "abcde... [5 chars truncated]"


def test_short_or_missing_output_is_left_alone():
    truncate = ProbeOutputTruncator(limit=5)

    assert truncate(None, "info", {"output": "abc"}) == {"output": "abc"}
    assert truncate(None, "info", {"event": "health_evaluated"}) == {"event": "health_evaluated"}


def test_output_limit_comes_from_settings():
    settings = Settings(LOG_PROBE_OUTPUT_CHARS=42, _env_file=None)

    chain = get_logging_config(settings)["formatters"]["default"]["foreign_pre_chain"]

    truncators = [p for p in chain if isinstance(p, ProbeOutputTruncator)]
    assert [t.limit for t in truncators] == [42]
