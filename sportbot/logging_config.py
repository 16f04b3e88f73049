"""
Structured logging for the results service.

structlog renders JSON lines in production (for the log drain) and a coloured
console format locally. Every event carries the bound `service` name.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    service_name: str = "sportbot-results",
) -> None:
    """
    Configure stdlib logging and structlog.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        json_logs: JSON output when True, console output otherwise
        service_name: Value bound to the `service` key of every event
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service_name)


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a structlog logger for `name` (usually `__name__`)."""
    return structlog.get_logger(name)


def log_request(
    logger: structlog.BoundLogger,
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    **kwargs: Any,
) -> None:
    """Log a finished HTTP request."""
    logger.info(
        "http_request",
        method=method,
        path=path,
        status_code=status_code,
        duration_ms=round(duration_ms, 2),
        **kwargs,
    )


def log_error(
    logger: structlog.BoundLogger,
    error: Exception,
    context: dict[str, Any] | None = None,
) -> None:
    """Log an exception with its type, message and traceback."""
    logger.error(
        "error_occurred",
        error_type=type(error).__name__,
        error_message=str(error),
        exc_info=True,
        **(context or {}),
    )


def log_validation(
    logger: structlog.BoundLogger,
    prediction_id: str,
    match_name: str,
    actual_score: str,
    outcome: str,
    **kwargs: Any,
) -> None:
    """Log a graded prediction."""
    logger.info(
        "prediction_graded",
        prediction_id=prediction_id,
        match_name=match_name,
        actual_score=actual_score,
        outcome=outcome,
        **kwargs,
    )
