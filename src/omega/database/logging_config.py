"""Logging setup shared by the query builders, the connection and the cron runner."""

import logging
import sys
from collections.abc import Sequence

import structlog

from omega.database.config import DatabaseSettings

# Loggers that write through the omega handler instead of propagating to root
OMEGA_LOGGERS = ('omega', 'sqlalchemy.engine')


def _resolve_level(log_level: str | None) -> int:
    name = log_level or DatabaseSettings().log_level
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(log_level: str | None = None, logger_names: Sequence[str] = OMEGA_LOGGERS) -> int:
    """
    Route structlog events and builder logs to one console handler.

    Executed statements, ignored binds and cron task reports are structlog
    events; the query builders and the SQLAlchemy engine echo use standard
    logging. Both end up on stdout rendered by ``ConsoleRenderer``.

    Args:
        log_level: Level name; ``OMEGA_DB_LOG_LEVEL`` (``DatabaseSettings``)
            when omitted, INFO when the name is unknown
        logger_names: Loggers bound to the handler with propagation off

    Returns:
        The numeric level applied
    """
    level = _resolve_level(log_level)
    timestamper = structlog.processors.TimeStamper(fmt='%Y-%m-%d %H:%M:%S', utc=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            timestamper,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(),
            foreign_pre_chain=[structlog.stdlib.add_log_level, timestamper],
        ),
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)

    for name in logger_names:
        logger = logging.getLogger(name)
        logger.handlers = [handler]
        logger.setLevel(level)
        logger.propagate = False

    return level
