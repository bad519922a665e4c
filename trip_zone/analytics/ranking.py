"""
Top-K Selector Module
=====================

Deterministic top-k selection over the aggregate tables.

Ranking order (strict, total):
- count descending
- zone ascending (code point order, same as UTF-8 byte order)
- hour ascending (slots only)

Design:
- The rank keys below are the only place the order is defined
- Tables larger than k are never fully sorted: either a numpy partition
  finds the k-th largest count (expected linear time) and entries tied at
  that count compete for the remaining places in a k-bounded heap, or a
  bounded heap keeps k entries (log k per insertion); only the kept
  entries are sorted
- Both strategies produce identical output
"""

import heapq
from enum import Enum
from typing import Callable, List, Sequence, Tuple, TypeVar

import numpy as np

from trip_zone.analytics.tables import SlotCount, TripTables, ZoneCount

Entry = TypeVar("Entry", ZoneCount, SlotCount)


class SelectionStrategy(str, Enum):
    """Bounded selection primitive used when the table holds more than k entries."""

    PARTITION = "partition"
    HEAP = "heap"


def zone_rank_key(entry: ZoneCount) -> Tuple[int, str]:
    return (-entry.count, entry.zone)


def slot_rank_key(entry: SlotCount) -> Tuple[int, str, int]:
    return (-entry.count, entry.zone, entry.hour)


def select_top_k(
    entries: Sequence[Entry],
    k: int,
    key: Callable[[Entry], tuple],
    strategy: SelectionStrategy = SelectionStrategy.PARTITION
) -> List[Entry]:
    """
    Return the k best entries in rank order.

    Args:
        entries: Unordered candidates (each with a .count)
        k: Number of entries wanted
        key: Rank key; smaller sorts first
        strategy: PARTITION (numpy threshold + bounded tie fill) or HEAP (heapq)

    Returns:
        List of length min(k, len(entries)); empty when k <= 0
    """
    n = len(entries)
    if k <= 0 or n == 0:
        return []

    if n <= k:
        return sorted(entries, key=key)

    if strategy == SelectionStrategy.HEAP:
        return heapq.nsmallest(k, entries, key=key)

    # k-th largest count: fewer than k entries beat it, ties fill the rest
    counts = np.fromiter((entry.count for entry in entries), dtype=np.int64, count=n)
    pivot = n - k
    threshold = np.partition(counts, pivot)[pivot]

    above = [entries[i] for i in np.flatnonzero(counts > threshold)]
    need = k - len(above)
    tied = (entries[i] for i in np.flatnonzero(counts == threshold))

    survivors = above + heapq.nsmallest(need, tied, key=key)
    survivors.sort(key=key)
    return survivors


class TopKSelector:
    """
    Read-only ranking queries over a TripTables snapshot.

    Usage:
        selector = TopKSelector(tables)
        selector.top_zones(10)       # [ZoneCount, ...]
        selector.top_busy_slots(10)  # [SlotCount, ...]
    """

    def __init__(
        self,
        tables: TripTables,
        strategy: SelectionStrategy = SelectionStrategy.PARTITION
    ):
        self.tables = tables
        self.strategy = SelectionStrategy(strategy)

    def top_zones(self, k: int) -> List[ZoneCount]:
        """Busiest pickup zones by trip count."""
        if k <= 0:
            return []
        return select_top_k(self.tables.zone_entries(), k, zone_rank_key, self.strategy)

    def top_busy_slots(self, k: int) -> List[SlotCount]:
        """Busiest (zone, hour) slots by trip count."""
        if k <= 0:
            return []
        return select_top_k(self.tables.slot_entries(), k, slot_rank_key, self.strategy)

    def __repr__(self) -> str:
        return f"TopKSelector(strategy={self.strategy.value}, tables={self.tables!r})"
