"""Structured logging for the error layer.

Every event goes through structlog and ends in a single stdlib handler on
stdout, rendered as one JSON object per line (or colored console output when
LOG_JSON is off). Stdlib records from other libraries share the same chain.
"""

import logging
import logging.config
import sys
from typing import Any

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from structlog.stdlib import BoundLogger
from structlog.typing import Processor


class LoggingSettings(BaseSettings):
    """Logging settings from environment variables."""

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=True, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


def level_for_status(status_code: int) -> str:
    """Name of the log method matching an HTTP status: server errors are errors,
    client errors are warnings, anything else is informational."""
    if status_code >= 500:
        return "error"
    if status_code >= 400:
        return "warning"
    return "info"


def _event_chain() -> list[Processor]:
    # request_id is bound per request by RequestIDMiddleware.
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        structlog.processors.format_exc_info,
    ]


def _handler_config(renderer: Processor, level: str) -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    renderer,
                ],
                "foreign_pre_chain": _event_chain(),
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "structured",
                "stream": sys.stdout,
            },
        },
        "root": {"handlers": ["stdout"], "level": level},
    }


def configure_logging(settings: LoggingSettings | None = None) -> None:
    """Route structlog through stdlib logging.

    Must run once before the first error is logged; create_app() calls it.
    Loggers obtained earlier from get_logger() are lazy and pick this up on
    first use.
    """
    settings = settings or LoggingSettings()
    renderer: Processor = (
        structlog.processors.JSONRenderer() if settings.log_json else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_event_chain(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.config.dictConfig(_handler_config(renderer, settings.log_level.upper()))


def get_logger(name: str) -> BoundLogger:
    """Structured logger named after the calling module."""
    return structlog.get_logger(name)  # type: ignore[no-any-return]
