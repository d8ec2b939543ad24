"""
Centralized logging configuration for the remaining operation.

This module provides standardized logging configuration using structlog
for all components. All logging throughout the system should use this
configuration to ensure consistent formatting and structured logging.
"""
import logging
import sys
from typing import TYPE_CHECKING, Any, Optional

import structlog
from structlog.types import FilteringBoundLogger

if TYPE_CHECKING:
    from ..buckets.models import BucketSnapshot


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    # Log to stderr so rendered screens on stdout stay clean
    logging.basicConfig(
        level=log_level,
        stream=sys.stderr,
        format="%(message)s"
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                       structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_bucket_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound to the bucket evaluation subsystem.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for bucket evaluations
    """
    # Initial values keep the proxy lazy, so configure_logging still applies
    return structlog.get_logger(name, subsystem="buckets")


def get_operation_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound to the remaining operation subsystem.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for the aggregation pipeline
    """
    return structlog.get_logger(name, subsystem="remaining_operation")


def log_bucket_evaluation(
    logger: FilteringBoundLogger,
    bucket_name: str,
    snapshot: "BucketSnapshot",
    periods_remaining: int,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a bucket evaluation with standardized format.

    Args:
        logger: Structlog logger instance
        bucket_name: Name of the evaluated bucket
        snapshot: Result of the evaluation
        periods_remaining: Number of periods the shortfall was spread over
        context: Additional context data
    """
    actual = snapshot.current_actual_deposit
    bound_logger = logger.bind(
        bucket_name=bucket_name,
        recommended_deposit=str(snapshot.current_recommended_deposit),
        actual_deposit=str(actual) if actual is not None else None,
        total_deposit=str(snapshot.total_deposit),
        periods_remaining=periods_remaining,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("bucket_evaluated")
