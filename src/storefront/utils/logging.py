"""Logging for the storefront command-line client.

Log records go to stderr so they never mix with command output on stdout.
``LOG_FILE`` additionally keeps them in a rotating file. Production and
staging render JSON lines; everywhere else gets the console renderer.
"""

import logging
import logging.handlers
import os
import sys
from typing import Any

import structlog

LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}


def current_env() -> str:
    return (os.getenv("PROTEAN_ENV") or os.getenv("ENVIRONMENT") or "development").lower()


def get_log_level(verbose: bool = False) -> str:
    """``LOG_LEVEL`` wins; otherwise the environment decides. ``verbose`` forces DEBUG."""
    if verbose:
        return "DEBUG"
    return os.getenv("LOG_LEVEL", LEVELS.get(current_env(), "INFO")).upper()


def _handlers() -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    log_file = os.getenv("LOG_FILE")
    if log_file:
        handlers.append(
            logging.handlers.RotatingFileHandler(
                filename=log_file,
                maxBytes=5 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
        )
    return handlers


def configure_logging(verbose: bool = False) -> None:
    """Route structlog through stdlib logging to stderr (and ``LOG_FILE`` when set)."""
    logging.basicConfig(
        level=get_log_level(verbose),
        format="%(message)s",
        handlers=_handlers(),
        force=True,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if current_env() in ("production", "staging"):
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Bind values that appear in every later log line of this run."""
    structlog.contextvars.bind_contextvars(**kwargs)
