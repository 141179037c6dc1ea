"""Logging configuration for the orderflow service.

Everything logs through structlog; the stdlib root logger only carries the
rendered lines (and whatever the libraries underneath emit).
"""

import logging
import os
import sys

import structlog

_LEVELS = {
    "production": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}


def current_env() -> str:
    return (os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level(env: str | None = None) -> str:
    """Resolve the log level, letting ``LOG_LEVEL`` override the environment default."""
    env = env or current_env()
    return os.getenv("LOG_LEVEL", _LEVELS.get(env, "INFO")).upper()


def configure_logging(env: str | None = None) -> None:
    """Configure stdlib logging and structlog for the given environment."""
    env = env or current_env()
    level = get_log_level(env)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    root_logger.addHandler(handler)

    # Protean logs every unit of work at INFO
    logging.getLogger("protean").setLevel(logging.WARNING)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if env == "production":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_context(**kwargs) -> None:
    """Attach key/value pairs to every log line emitted from this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context(*keys) -> None:
    """Drop the given keys, or every bound key when none are named."""
    if keys:
        structlog.contextvars.unbind_contextvars(*keys)
    else:
        structlog.contextvars.clear_contextvars()
