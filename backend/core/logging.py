"""Structured Logging System for the Slovo Backend

Provides:
- Colored, human-readable dev output
- JSON structured production output
- Correlation IDs for HTTP requests and long-running imports
- Context propagation
"""
import logging
import sys
from uuid import uuid4

import structlog
from structlog.types import EventDict, Processor


def _add_service_info(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Processor that adds service metadata."""
    event_dict.setdefault("service", "slovo-backend")
    event_dict.setdefault("version", "0.1.0")
    return event_dict


def _truncate_long_values(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Processor that shortens oversized string values (raw dump lines, sentences)."""
    for key, value in event_dict.items():
        if key != "event" and isinstance(value, str) and len(value) > 300:
            event_dict[key] = value[:300] + "…"
    return event_dict


def get_shared_processors() -> list[Processor]:
    """Processors used in both dev and prod configurations."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_service_info,
        _truncate_long_values,
    ]


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    log_sql: bool = False,
) -> None:
    """Configure the logging system.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, output JSON format (for production). If False, colored console output.
        log_sql: If True, enable SQLAlchemy SQL statement logging.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors = get_shared_processors()

    if json_logs:
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    # Formatter for stdlib logger (handles logs from third-party libs)
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(log_level)

    for logger_name in ["uvicorn", "uvicorn.error"]:
        logging.getLogger(logger_name).handlers = []

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)

    # SQLAlchemy logging
    sa_level = logging.DEBUG if log_sql else logging.WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(sa_level)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ from the calling module)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for request or import tracing."""
    return str(uuid4())[:8]


def bind_context(**kwargs) -> None:
    """Bind key-value pairs to the current logging context.

    These will appear in all subsequent log messages within this context.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


class LoggerRegistry:
    """Registry of pre-configured loggers for different application domains."""

    _loggers: dict[str, structlog.stdlib.BoundLogger] = {}

    @classmethod
    def get(cls, name: str) -> structlog.stdlib.BoundLogger:
        """Get or create a logger for the given domain."""
        if name not in cls._loggers:
            cls._loggers[name] = get_logger(f"slovo.{name}")
        return cls._loggers[name]


def api_logger() -> structlog.stdlib.BoundLogger:
    """Logger for API layer events."""
    return LoggerRegistry.get("api")


def db_logger() -> structlog.stdlib.BoundLogger:
    """Logger for store operations."""
    return LoggerRegistry.get("db")


def ingest_logger() -> structlog.stdlib.BoundLogger:
    """Logger for dictionary and frequency imports."""
    return LoggerRegistry.get("ingest")


def ledger_logger() -> structlog.stdlib.BoundLogger:
    """Logger for lemmatization and ledger updates."""
    return LoggerRegistry.get("ledger")


def queue_logger() -> structlog.stdlib.BoundLogger:
    """Logger for study queue ranking."""
    return LoggerRegistry.get("queue")


def srs_logger() -> structlog.stdlib.BoundLogger:
    """Logger for SRS (spaced repetition) events."""
    return LoggerRegistry.get("srs")
