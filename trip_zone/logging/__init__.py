"""
Structured Logging for Trip Zone
================================

Bounded Context: Observability

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function

Example:
    >>> from trip_zone.logging import create_logger, LogEvent
    >>> logger = create_logger("pipeline")
    >>> logger.info(
    ...     event=LogEvent.INGEST_STARTED,
    ...     message="Ingesting trips.csv",
    ...     metadata={'layout': 'headered'}
    ... )
"""

from .events import LogEvent
from .structured import StructuredLogger, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]
