"""
structlog setup for docker-relay.

stdout carries the JSON-RPC stream, so every log line goes to stderr.
"""
import logging
import sys

import structlog

from .exceptions import ConfigurationError


def _stderr_logger(*args) -> structlog.PrintLogger:
    # sys.stderr is looked up per logger, it may be swapped after configuration
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Configure structlog to render to stderr at the given level"""
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ConfigurationError(f"Unknown log level: {level}")

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )
