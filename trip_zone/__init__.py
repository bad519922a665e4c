"""
Trip Zone Analyzer v1.0
=======================

Bounded Context: Pickup zone activity reports from trip-record datasets.

Design Philosophy:
- Separation of Concerns: Parsing, Analytics, Pipeline separated
- Pure parsing over offsets into the original line (no per-field copies)
- Best effort ingestion: bad lines are dropped, never fatal
- Deterministic ranking: one rank key per report

Architecture:

    trip_zone/
    ├── parsing/           # Pure line parsing (stateless)
    │   ├── fields.py      # locate_delimiters, field_range, trim_range
    │   └── hours.py       # extract_hour
    │
    ├── analytics/         # Counting & ranking
    │   ├── tables.py      # TripTables, ZoneCount, SlotCount
    │   └── ranking.py     # TopKSelector, select_top_k
    │
    ├── logging/           # Structured JSON logs
    ├── config.py          # RecordLayout, AnalyzerConfig
    └── pipeline.py        # TripAnalyzer (ingest + queries)

Usage:

    from trip_zone import TripAnalyzer, RecordLayout

    analyzer = TripAnalyzer(layout=RecordLayout.preset("headered"))
    report = analyzer.ingest("trips.csv")

    analyzer.top_zones(10)       # [ZoneCount("132", 5120), ...]
    analyzer.top_busy_slots(10)  # [SlotCount("132", 17, 410), ...]
"""

# Parsing Layer (stateless)
from trip_zone.parsing import (
    FieldRange,
    locate_delimiters,
    field_range,
    trim_range,
    field_text,
    extract_hour,
)

# Analytics Layer
from trip_zone.analytics import (
    TripTables,
    ZoneCount,
    SlotCount,
    SelectionStrategy,
    TopKSelector,
)

# Configuration
from trip_zone.config import AnalyzerConfig, RecordLayout

# Pipeline (orchestration)
from trip_zone.pipeline import TripAnalyzer, IngestReport, RejectReason

__all__ = [
    # Parsing
    "FieldRange",
    "locate_delimiters",
    "field_range",
    "trim_range",
    "field_text",
    "extract_hour",
    # Analytics
    "TripTables",
    "ZoneCount",
    "SlotCount",
    "SelectionStrategy",
    "TopKSelector",
    # Configuration
    "AnalyzerConfig",
    "RecordLayout",
    # Pipeline
    "TripAnalyzer",
    "IngestReport",
    "RejectReason",
]

__version__ = "1.0.0"
