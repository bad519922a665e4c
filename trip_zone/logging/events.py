"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

Typed event names for the analyzer's structured logs.

Event Naming Convention:
    <component>.<action>

    component: ingest, query, config, error

Example Log Query (CloudWatch Insights):
    fields @timestamp, event, metadata.records_accepted
    | filter event = "ingest.completed"
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - ingest.*: Dataset ingestion lifecycle
    - query.*: Top-k report queries
    - config.*: Configuration loading
    - error.*: Error conditions
    """

    # ========== Ingest Events ==========
    INGEST_STARTED = "ingest.started"
    """Ingestion run started (tables cleared)."""

    INGEST_HEADER_DISCARDED = "ingest.header_discarded"
    """Header line read and discarded for a headered layout."""

    INGEST_COMPLETED = "ingest.completed"
    """Ingestion run finished, with accepted/rejected counts."""

    INGEST_SOURCE_UNAVAILABLE = "ingest.source_unavailable"
    """Source missing or unreadable, tables left empty."""

    # ========== Query Events ==========
    QUERY_EXECUTED = "query.executed"
    """Top-k query answered."""

    # ========== Config Events ==========
    CONFIG_LOADED = "config.loaded"
    """Analyzer configuration loaded from YAML."""

    # ========== Error Events ==========
    CONFIG_ERROR = "error.config"
    """Configuration could not be loaded or validated."""
