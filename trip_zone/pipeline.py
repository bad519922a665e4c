"""
Trip Ingestion Pipeline
=======================

Bounded Context: Dataset ingestion and report queries.

Design:
- Orchestrator: parsing -> aggregate tables -> top-k selector
- Session object: TripAnalyzer owns its tables (no module globals)
- Best effort: unreadable sources yield empty tables, malformed lines
  are dropped and only counted
- Lifecycle: tables cleared at the start of every ingest, mutated while
  ingesting, read by the queries afterwards

Data flow:
    raw line -> locate_delimiters -> (zone field, date-time field)
             -> extract_hour -> TripTables.record(zone, hour)
             -> TopKSelector -> ranked report
"""

from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from trip_zone.analytics.ranking import SelectionStrategy, TopKSelector
from trip_zone.analytics.tables import SlotCount, TripTables, ZoneCount
from trip_zone.config import AnalyzerConfig, RecordLayout, DEFAULT_LAYOUT
from trip_zone.logging import LogEvent, StructuredLogger, create_logger
from trip_zone.parsing.fields import field_range, field_text, locate_delimiters
from trip_zone.parsing.hours import extract_hour

IN_MEMORY_SOURCE = "<lines>"


class RejectReason(str, Enum):
    """Why a record line was dropped."""

    TOO_FEW_FIELDS = "too_few_fields"
    EMPTY_ZONE = "empty_zone"
    BAD_DATETIME = "bad_datetime"


@dataclass(frozen=True)
class IngestReport:
    """
    Immutable summary of one ingestion run.

    Attributes:
        source: Path (or "<lines>" for in-memory input)
        layout: Layout name used
        source_available: False when the source could not be opened or read
        header_discarded: Whether a header line was consumed
        lines_read: Physical lines consumed, header and blank lines included
        records_accepted: Lines counted in the tables
        rejected: Dropped lines per RejectReason value
    """

    source: str
    layout: str
    source_available: bool = True
    header_discarded: bool = False
    lines_read: int = 0
    records_accepted: int = 0
    rejected: Dict[str, int] = field(default_factory=dict)

    @property
    def records_rejected(self) -> int:
        return sum(self.rejected.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': self.source,
            'layout': self.layout,
            'source_available': self.source_available,
            'header_discarded': self.header_discarded,
            'lines_read': self.lines_read,
            'records_accepted': self.records_accepted,
            'records_rejected': self.records_rejected,
            'rejected': dict(self.rejected),
        }


class TripAnalyzer:
    """
    Ingestion session answering the two report queries.

    Usage:
        analyzer = TripAnalyzer(layout=RecordLayout.preset("headered"))
        analyzer.ingest("trips.csv")

        analyzer.top_zones(10)       # [ZoneCount(zone, count), ...]
        analyzer.top_busy_slots(10)  # [SlotCount(zone, hour, count), ...]
    """

    def __init__(
        self,
        layout: Optional[RecordLayout] = None,
        strategy: SelectionStrategy = SelectionStrategy.PARTITION,
        logger: Optional[StructuredLogger] = None
    ):
        """
        Args:
            layout: Record layout (default: headered preset)
            strategy: Top-k selection primitive
            logger: Structured logger (default: trip_zone.pipeline)
        """
        self.layout = layout or RecordLayout.preset(DEFAULT_LAYOUT)
        self.logger = logger or create_logger("pipeline")
        self._tables = TripTables()
        self._selector = TopKSelector(self._tables, strategy)
        self._last_report: Optional[IngestReport] = None

    @classmethod
    def from_config(
        cls,
        config: AnalyzerConfig,
        logger: Optional[StructuredLogger] = None
    ) -> "TripAnalyzer":
        return cls(layout=config.layout, strategy=config.selection, logger=logger)

    @property
    def tables(self) -> TripTables:
        return self._tables

    @property
    def last_report(self) -> Optional[IngestReport]:
        return self._last_report

    def ingest(self, path: Union[str, Path]) -> IngestReport:
        """
        Rebuild both tables from a delimited file.

        Never raises for I/O problems: a missing or unreadable file leaves
        the tables empty and is reported with source_available=False.

        Args:
            path: Dataset file

        Returns:
            IngestReport for this run
        """
        source = str(path)
        self._start(source)

        try:
            with open(path, encoding="utf-8-sig", errors="replace", newline="") as f:
                report = self._consume(f, source)
        except OSError as e:
            self._tables.clear()
            self.logger.warning(
                event=LogEvent.INGEST_SOURCE_UNAVAILABLE,
                message="Cannot read source, tables left empty",
                metadata={'source': source},
                exc_info=e
            )
            report = IngestReport(
                source=source,
                layout=self.layout.name,
                source_available=False,
            )

        return self._finish(report)

    def ingest_lines(self, lines: Iterable[str], source: str = IN_MEMORY_SOURCE) -> IngestReport:
        """
        Rebuild both tables from in-memory lines (same rules as ingest()).

        Args:
            lines: Record lines, with or without terminators
            source: Label used in logs and the report
        """
        self._start(source)
        return self._finish(self._consume(lines, source))

    def top_zones(self, k: int) -> List[ZoneCount]:
        """Busiest pickup zones: count desc, zone asc."""
        result = self._selector.top_zones(k)
        self._log_query("top_zones", k, len(result))
        return result

    def top_busy_slots(self, k: int) -> List[SlotCount]:
        """Busiest (zone, hour) slots: count desc, zone asc, hour asc."""
        result = self._selector.top_busy_slots(k)
        self._log_query("top_busy_slots", k, len(result))
        return result

    def _start(self, source: str) -> None:
        self._tables.clear()
        self.logger.info(
            event=LogEvent.INGEST_STARTED,
            message=f"Ingesting {source}",
            metadata={'source': source, 'layout': self.layout.name}
        )

    def _finish(self, report: IngestReport) -> IngestReport:
        self._last_report = report
        if report.source_available:
            self.logger.info(
                event=LogEvent.INGEST_COMPLETED,
                message="Ingestion finished",
                metadata={
                    **report.to_dict(),
                    'distinct_zones': self._tables.distinct_zones,
                    'distinct_slots': self._tables.distinct_slots,
                }
            )
        return report

    def _consume(self, lines: Iterable[str], source: str) -> IngestReport:
        """Run the per-line algorithm over an iterable of lines."""
        rejected: Dict[str, int] = defaultdict(int)
        lines_read = 0
        accepted = 0
        header_discarded = False

        it: Iterator[str] = iter(lines)

        if self.layout.has_header:
            header = next(it, None)
            if header is not None:
                lines_read += 1
                header_discarded = True
                self.logger.debug(
                    event=LogEvent.INGEST_HEADER_DISCARDED,
                    message="Header line discarded",
                    metadata={'source': source, 'header': header.rstrip("\r\n")}
                )

        for line in it:
            lines_read += 1
            line = line.rstrip("\r\n")
            if not line:
                continue

            reason = self._process_line(line)
            if reason is None:
                accepted += 1
            else:
                rejected[reason.value] += 1

        return IngestReport(
            source=source,
            layout=self.layout.name,
            header_discarded=header_discarded,
            lines_read=lines_read,
            records_accepted=accepted,
            rejected=dict(rejected),
        )

    def _process_line(self, line: str) -> Optional[RejectReason]:
        """
        Count one record, or say why it was dropped.

        Zone and hour are both resolved before anything is recorded, so a
        rejected line never touches either table.
        """
        layout = self.layout
        delimiters = locate_delimiters(line, layout.delimiter)
        if len(delimiters) + 1 < layout.min_fields:
            return RejectReason.TOO_FEW_FIELDS

        zone = field_text(line, delimiters, layout.zone_index)
        if zone is None:
            return RejectReason.EMPTY_ZONE

        hour = None
        for index in layout.datetime_indices:
            rng = field_range(line, delimiters, index)
            if rng is None:
                continue
            hour = extract_hour(line, rng.begin, rng.end)
            if hour is not None:
                break

        if hour is None:
            return RejectReason.BAD_DATETIME

        self._tables.record(zone, hour)
        return None

    def _log_query(self, query: str, k: int, returned: int) -> None:
        self.logger.debug(
            event=LogEvent.QUERY_EXECUTED,
            message=f"{query}({k}) answered",
            metadata={'query': query, 'k': k, 'returned': returned}
        )

    def __repr__(self) -> str:
        return f"TripAnalyzer(layout={self.layout.name}, tables={self._tables!r})"
