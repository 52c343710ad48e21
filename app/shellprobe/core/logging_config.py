"""Logging configuration for the shellprobe service.

Implement a declarative configuration pattern that separates configuration
generation from execution:

    - `get_logging_config`: Generate a standard library logging configuration
      dictionary from application settings.
    - `configure_structlog_wrapper`: Configure structlog's logger factory and
      processor chain.
    - Context utilities via `structlog.contextvars` for request correlation.
"""

from typing import Any, MutableMapping

import structlog
from structlog.types import Processor

from app.config import Settings

PROBE_LOGGER_NAME = "app.shellprobe.runner"


# =============================================================================
# CONFIGURATION GENERATORS
# =============================================================================


class ProbeOutputTruncator:
    """Cap the `output` field of log events.

    Probe commands can print arbitrarily large output; the HTTP body carries
    it in full, log lines carry at most `limit` characters of it.
    """

    def __init__(self, limit: int) -> None:
        self.limit = limit

    def __call__(
        self, logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
    ) -> MutableMapping[str, Any]:
        output = event_dict.get("output")
        if isinstance(output, str) and len(output) > self.limit:
            dropped = len(output) - self.limit
            event_dict["output"] = f"{output[: self.limit]}... [{dropped} chars truncated]"
        return event_dict


def get_common_processors(output_limit: int = 512) -> list[Processor]:
    """Return the processor chain shared by JSON and console outputs.

    Args:
        output_limit: Maximum characters of probe output kept per log event.

    Returns:
        list[Processor]: Ordered list of structlog processors.
    """
    return [
        structlog.contextvars.merge_contextvars,
        ProbeOutputTruncator(output_limit),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def get_logging_config(settings: Settings) -> dict[str, Any]:
    """Generate a configuration dictionary for `logging.config.dictConfig`.

    Production and staging render JSON lines for log shippers; development
    renders colored console output.

    Note:
        This is a pure function that does not modify global state.

    Args:
        settings: Application settings containing LOG_LEVEL, ENVIRONMENT and
            the optional PROBE_LOG_LEVEL for per-probe events.

    Returns:
        dict[str, Any]: Configuration dictionary compatible with dictConfig.
    """
    log_level = settings.LOG_LEVEL.upper()
    is_production = settings.ENVIRONMENT.lower() in ("production", "staging")

    if is_production:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": "structlog.stdlib.ProcessorFormatter",
                "processor": renderer,
                "foreign_pre_chain": get_common_processors(settings.LOG_PROBE_OUTPUT_CHARS),
            },
        },
        "handlers": {
            "console": {
                "level": log_level,
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "": {
                "handlers": ["console"],
                "level": log_level,
                "propagate": True,
            },
            **{
                lib: {"level": "WARNING", "propagate": False}
                for lib in settings.LOGGING_NOISY_MODULES
            },
            **(
                {PROBE_LOGGER_NAME: {"level": settings.PROBE_LOG_LEVEL.upper()}}
                if settings.PROBE_LOG_LEVEL
                else {}
            ),
        },
    }


def configure_structlog_wrapper(settings: Settings) -> None:
    """Configure the structlog wrapper and processor chain.

    Args:
        settings: Application settings supplying the probe output limit.
    """
    structlog_processors = [
        structlog.stdlib.filter_by_level,
        *get_common_processors(settings.LOG_PROBE_OUTPUT_CHARS),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]

    structlog.configure(
        processors=structlog_processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


# =============================================================================
# LOGGER RETRIEVAL
# =============================================================================


def get_logger(name: str | None = None) -> Any:
    """Retrieve a configured structlog logger instance.

    Args:
        name: Optional logger name. If omitted, return the root logger.

    Returns:
        A bound structlog logger instance.
    """
    if name:
        return structlog.get_logger(name)
    return structlog.get_logger()


# =============================================================================
# CONTEXT VARIABLE EXPORTS
# =============================================================================

bind_contextvars = structlog.contextvars.bind_contextvars
unbind_contextvars = structlog.contextvars.unbind_contextvars
clear_contextvars = structlog.contextvars.clear_contextvars
get_contextvars = structlog.contextvars.get_contextvars
