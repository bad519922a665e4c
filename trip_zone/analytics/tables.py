"""
Trip Tables Module
==================

Stateful aggregate tables for one ingestion session.

Design:
- Mutable accumulators (private state)
- Immutable output entries (ZoneCount, SlotCount)
- One record() call updates both tables together
- Reset capability (clear())
"""

from collections import defaultdict
from dataclasses import dataclass, asdict
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

SlotKey = Tuple[str, int]


@dataclass(frozen=True)
class ZoneCount:
    """
    Ranked zone entry (output only).

    Attributes:
        zone: Pickup zone identifier (trimmed, verbatim)
        count: Number of accepted records for the zone
    """

    zone: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return asdict(self)

    def __str__(self) -> str:
        return f"{self.zone},{self.count}"


@dataclass(frozen=True)
class SlotCount:
    """
    Ranked (zone, hour) entry (output only).

    Attributes:
        zone: Pickup zone identifier
        hour: Hour of day, 0-23
        count: Number of accepted records for the zone in that hour
    """

    zone: str
    hour: int
    count: int

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return asdict(self)

    def __str__(self) -> str:
        return f"{self.zone},{self.hour},{self.count}"


class TripTables:
    """
    Zone Count Table and Slot Count Table for one ingestion run.

    Entries are created lazily on first occurrence and never deleted
    until clear(). Every zone count equals the sum of that zone's slot
    counts, because record() is the only mutator.

    Usage:
        tables = TripTables()
        tables.record("132", 9)
        tables.zone_counts()   # {"132": 1}
        tables.slot_counts()   # {("132", 9): 1}
    """

    def __init__(self):
        self._zone_counts: Dict[str, int] = defaultdict(int)
        self._slot_counts: Dict[SlotKey, int] = defaultdict(int)

    def record(self, zone: str, hour: int) -> None:
        """
        Count one accepted trip in both tables.

        Args:
            zone: Trimmed, non-empty zone identifier
            hour: Hour of day in [0, 23]
        """
        self._zone_counts[zone] += 1
        self._slot_counts[(zone, hour)] += 1

    def clear(self) -> None:
        """Drop all entries from both tables."""
        self._zone_counts.clear()
        self._slot_counts.clear()

    def zone_counts(self) -> Mapping[str, int]:
        """Read-only view of the Zone Count Table."""
        return MappingProxyType(self._zone_counts)

    def slot_counts(self) -> Mapping[SlotKey, int]:
        """Read-only view of the Slot Count Table."""
        return MappingProxyType(self._slot_counts)

    def hours_for(self, zone: str) -> Dict[int, int]:
        """
        Hourly histogram of a single zone.

        Returns:
            {hour: count} for the hours the zone was seen in (empty if unknown)
        """
        return {
            hour: count
            for (slot_zone, hour), count in self._slot_counts.items()
            if slot_zone == zone
        }

    def zone_entries(self) -> List[ZoneCount]:
        """Unordered ZoneCount candidates for ranking."""
        return [ZoneCount(zone, count) for zone, count in self._zone_counts.items()]

    def slot_entries(self) -> List[SlotCount]:
        """Unordered SlotCount candidates for ranking."""
        return [
            SlotCount(zone, hour, count)
            for (zone, hour), count in self._slot_counts.items()
        ]

    @property
    def distinct_zones(self) -> int:
        return len(self._zone_counts)

    @property
    def distinct_slots(self) -> int:
        return len(self._slot_counts)

    @property
    def total_records(self) -> int:
        """Number of accepted records (sum of the Zone Count Table)."""
        return sum(self._zone_counts.values())

    def __len__(self) -> int:
        return len(self._zone_counts)

    def __repr__(self) -> str:
        return (
            f"TripTables(zones={self.distinct_zones}, "
            f"slots={self.distinct_slots}, records={self.total_records})"
        )
