"""
Analytics Layer
===============

Bounded Context: Aggregate counting and ranking.

Responsibilities:
- Accumulate per-zone and per-(zone, hour) trip counts (mutable state)
- Produce immutable ranked entries
- Deterministic top-k selection without full sorts

Design Philosophy:
- Mutable accumulators (TripTables)
- Immutable outputs (ZoneCount, SlotCount)
- Ranking order defined once (rank keys)
"""

from trip_zone.analytics.tables import TripTables, ZoneCount, SlotCount
from trip_zone.analytics.ranking import (
    SelectionStrategy,
    TopKSelector,
    select_top_k,
    zone_rank_key,
    slot_rank_key,
)

__all__ = [
    "TripTables",
    "ZoneCount",
    "SlotCount",
    "SelectionStrategy",
    "TopKSelector",
    "select_top_k",
    "zone_rank_key",
    "slot_rank_key",
]
