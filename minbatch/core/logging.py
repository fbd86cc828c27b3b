"""
Structured logging configuration for the min-batch adapters.

Log entries are produced with `structlog` on top of the standard library
`logging` module, so the host application's handlers and levels apply. Call
``setup_structured_logging`` once at startup to install the JSON (or console)
renderer; without it, `structlog` falls back to its default configuration.
"""

import logging
import sys
from typing import Any, Dict, Optional

import structlog

from minbatch.core.config import LoggingConfig, get_settings


def setup_structured_logging(config: Optional[LoggingConfig] = None) -> None:
    """Configures structured logging for the package.

    Args:
        config: Logging options. Defaults to the ``logging`` section of the
            environment settings.
    """
    config = config or get_settings().logging

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, config.log_level.upper(), logging.INFO),
    )

    renderer = (
        structlog.dev.ConsoleRenderer(colors=False)
        if config.log_format == "console"
        else structlog.processors.JSONRenderer()
    )

    shared_processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        _add_component,
        renderer,
    ]

    structlog.configure(
        processors=shared_processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_component(
    logger: logging.Logger, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Adds the library and component name to log entries.

    Args:
        logger: The standard library logger instance.
        method_name: The name of the logging method (e.g., 'info', 'error').
        event_dict: The dictionary representing the log entry to be enriched.

    Returns:
        The enriched log entry dictionary.
    """
    event_dict.setdefault("library", "minbatch")
    event_dict.setdefault("component", getattr(logger, "name", "unknown"))
    return event_dict


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Retrieves a `structlog` logger instance.

    Args:
        name: The name of the logger, typically the module's `__name__`.

    Returns:
        A configured `structlog` logger instance.
    """
    return structlog.get_logger(name)


def get_contextual_logger(name: str, **extra_context) -> structlog.stdlib.BoundLogger:
    """Retrieves a logger with additional, permanently bound context.

    Args:
        name: The name of the logger, typically the module's `__name__`.
        **extra_context: Keyword arguments to be bound to the logger's context.

    Returns:
        A `structlog` logger with the specified context bound to it.
    """
    logger = structlog.get_logger(name)
    return logger.bind(**extra_context) if extra_context else logger
