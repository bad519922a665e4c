"""
Test Ingestion Pipeline
=======================

End-to-end ingestion over both record layouts, plus configuration.

Usage:
    pytest test_pipeline.py
"""

import pytest

from trip_zone import (
    AnalyzerConfig,
    RecordLayout,
    SelectionStrategy,
    SlotCount,
    TripAnalyzer,
    ZoneCount,
)
from trip_zone.logging import create_logger

HEADER = "TripID,PickupZoneID,DropoffZoneID,PickupDateTime,DistanceKm,FareAmount"

HEADERED_ROWS = [
    HEADER,
    "1,A,X,2024-01-05 09:15,1.2,5.50",
    "2,A,X,2024-01-05 09:45,0.8,4.00",
    "3,B,Y,2024-01-05 10:00,3.1,11.25",
]


def write_lines(path, lines):
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def analyzer():
    return TripAnalyzer(logger=create_logger("test"))


def assert_tables_consistent(analyzer):
    tables = analyzer.tables
    for zone, count in tables.zone_counts().items():
        assert count == sum(tables.hours_for(zone).values())
    assert sum(tables.zone_counts().values()) == sum(tables.slot_counts().values())


# ========== Layout B (headered) ==========

def test_headered_end_to_end(tmp_path, analyzer):
    path = write_lines(tmp_path / "trips.csv", HEADERED_ROWS)

    report = analyzer.ingest(path)

    assert report.source_available
    assert report.header_discarded
    assert report.records_accepted == 3
    assert analyzer.top_zones(2) == [ZoneCount("A", 2), ZoneCount("B", 1)]
    assert analyzer.top_busy_slots(3) == [SlotCount("A", 9, 2), SlotCount("B", 10, 1)]
    assert_tables_consistent(analyzer)


def test_headered_with_zone_in_first_field(tmp_path):
    # rows shaped "zone,?,?,date-time,?,?"
    path = write_lines(tmp_path / "trips.csv", [
        "zone,x,y,when,d,f",
        "A,1,,2024-01-05 09:15,,",
        "A,1,,2024-01-05 09:45,,",
        "B,1,,2024-01-05 10:00,,",
    ])
    analyzer = TripAnalyzer(
        layout=RecordLayout.preset("headered", zone_index=0),
        logger=create_logger("test"),
    )
    analyzer.ingest(path)

    assert analyzer.top_zones(2) == [ZoneCount("A", 2), ZoneCount("B", 1)]
    assert analyzer.top_busy_slots(3) == [SlotCount("A", 9, 2), SlotCount("B", 10, 1)]


def test_header_discarded_unconditionally(analyzer):
    # the first line looks like a record but is still dropped
    report = analyzer.ingest_lines(HEADERED_ROWS[1:])

    assert report.header_discarded
    assert report.records_accepted == 2
    assert analyzer.top_zones(5) == [ZoneCount("A", 1), ZoneCount("B", 1)]


def test_headered_rejects_malformed_lines(analyzer):
    report = analyzer.ingest_lines([
        HEADER,
        "1,A,X,2024-01-05 09:15,1.2,5.50",
        "2,A,X,2024-01-05 09:15,1.2",          # five fields
        "3,   ,X,2024-01-05 09:15,1.2,5.50",   # blank zone
        "4,B,X,2024-01-05 24:00,1.2,5.50",     # hour out of range
        "5,B,X,2024-01-05 09:75,1.2,5.50",     # minute out of range
        "6,B,X,not a date,1.2,5.50",
        "",
        "7, C ,X, 2024-01-05 23:05 ,1.2,5.50",
    ])

    assert report.records_accepted == 2
    assert report.rejected == {"too_few_fields": 1, "empty_zone": 1, "bad_datetime": 3}
    assert report.records_rejected == 5
    assert report.lines_read == 9
    assert dict(analyzer.tables.zone_counts()) == {"A": 1, "C": 1}
    assert dict(analyzer.tables.slot_counts()) == {("A", 9): 1, ("C", 23): 1}


def test_crlf_and_blank_lines(tmp_path, analyzer):
    path = tmp_path / "trips.csv"
    path.write_bytes(
        b"h1,h2,h3,h4,h5,h6\r\n"
        b"1,A,X,2024-01-05 09:15,1,2\r\n"
        b"\r\n"
        b"2,B,X,2024-01-05 18:59,1,2\r\n"
    )
    analyzer.ingest(path)

    assert analyzer.top_busy_slots(5) == [SlotCount("A", 9, 1), SlotCount("B", 18, 1)]


def test_byte_order_mark_is_not_part_of_first_zone(tmp_path):
    path = tmp_path / "trips.csv"
    path.write_bytes(
        "\ufeffA,1,2024-01-05 09:15\nA,2,2024-01-05 09:40\n".encode("utf-8")
    )
    analyzer = TripAnalyzer(
        layout=RecordLayout.preset("headerless", zone_index=0),
        logger=create_logger("test"),
    )
    analyzer.ingest(path)

    assert dict(analyzer.tables.zone_counts()) == {"A": 2}
    assert analyzer.top_busy_slots(1) == [SlotCount("A", 9, 2)]


def test_header_only_and_empty_sources(tmp_path, analyzer):
    report = analyzer.ingest(write_lines(tmp_path / "header.csv", [HEADER]))
    assert report.source_available
    assert report.records_accepted == 0
    assert analyzer.top_zones(3) == []

    empty = tmp_path / "empty.csv"
    empty.write_text("")
    report = analyzer.ingest(empty)
    assert report.source_available
    assert not report.header_discarded
    assert analyzer.top_busy_slots(3) == []


# ========== Layout A (headerless) ==========

def test_headerless_tries_field_two_then_three():
    analyzer = TripAnalyzer(
        layout=RecordLayout.preset("headerless"),
        logger=create_logger("test"),
    )
    report = analyzer.ingest_lines([
        "1,A,2024-01-05 09:15",
        "2,B,C,2024-01-05 11:30,3.2,9.0",
        "3,A,2024-01-05 09:59",
        "4,A",
        "5, ,2024-01-05 09:00",
        "6,C,garbage",
        "7,C,garbage,also garbage",
    ])

    assert not report.header_discarded
    assert report.records_accepted == 3
    assert report.rejected == {"too_few_fields": 1, "empty_zone": 1, "bad_datetime": 2}
    assert analyzer.top_zones(10) == [ZoneCount("A", 2), ZoneCount("B", 1)]
    assert analyzer.top_busy_slots(10) == [SlotCount("A", 9, 2), SlotCount("B", 11, 1)]


def test_headerless_counts_first_line():
    analyzer = TripAnalyzer(
        layout=RecordLayout.preset("headerless"),
        logger=create_logger("test"),
    )
    analyzer.ingest_lines(["1,A,2024-01-05 09:15"])
    assert analyzer.top_zones(1) == [ZoneCount("A", 1)]


# ========== Failure semantics and lifecycle ==========

def test_missing_source_yields_empty_tables(tmp_path, analyzer):
    analyzer.ingest(write_lines(tmp_path / "trips.csv", HEADERED_ROWS))
    assert analyzer.top_zones(1)

    report = analyzer.ingest(tmp_path / "does-not-exist.csv")

    assert not report.source_available
    assert report.records_accepted == 0
    assert analyzer.top_zones(5) == []
    assert analyzer.top_busy_slots(5) == []
    assert analyzer.last_report is report


def test_directory_source_yields_empty_tables(tmp_path, analyzer):
    report = analyzer.ingest(tmp_path)
    assert not report.source_available
    assert len(analyzer.tables) == 0


def test_reingest_is_idempotent(tmp_path, analyzer):
    path = write_lines(tmp_path / "trips.csv", HEADERED_ROWS)

    analyzer.ingest(path)
    zones = dict(analyzer.tables.zone_counts())
    slots = dict(analyzer.tables.slot_counts())

    analyzer.ingest(path)
    assert dict(analyzer.tables.zone_counts()) == zones
    assert dict(analyzer.tables.slot_counts()) == slots


def test_non_positive_k(tmp_path, analyzer):
    analyzer.ingest(write_lines(tmp_path / "trips.csv", HEADERED_ROWS))
    assert analyzer.top_zones(0) == []
    assert analyzer.top_busy_slots(-1) == []


@pytest.mark.parametrize("strategy", list(SelectionStrategy))
def test_larger_dataset_invariants(strategy):
    analyzer = TripAnalyzer(strategy=strategy, logger=create_logger("test"))
    lines = [HEADER]
    for i in range(3000):
        zone = f"{(i * 7919) % 263}"
        hour = (i * 31) % 24
        lines.append(f"{i},{zone},1,2024-02-{1 + i % 28:02d} {hour}:{i % 60:02d},1.0,5.0")

    report = analyzer.ingest_lines(lines)
    assert report.records_accepted == 3000
    assert_tables_consistent(analyzer)

    top = analyzer.top_zones(5)
    assert len(top) == 5
    assert top == sorted(analyzer.tables.zone_entries(), key=lambda e: (-e.count, e.zone))[:5]


def test_report_serializes():
    analyzer = TripAnalyzer(logger=create_logger("test"))
    data = analyzer.ingest_lines(HEADERED_ROWS).to_dict()

    assert data["source"] == "<lines>"
    assert data["layout"] == "headered"
    assert data["records_accepted"] == 3
    assert data["records_rejected"] == 0


# ========== Configuration ==========

def test_layout_presets():
    headered = RecordLayout.preset("headered")
    assert headered.has_header
    assert (headered.zone_index, headered.datetime_indices, headered.min_fields) == (1, (3,), 6)

    headerless = RecordLayout.preset("headerless")
    assert not headerless.has_header
    assert (headerless.zone_index, headerless.datetime_indices, headerless.min_fields) == (1, (2, 3), 3)


def test_layout_override_raises_min_fields():
    layout = RecordLayout.preset("headerless", zone_index=4, datetime_indices=(2,))
    assert layout.min_fields == 5


@pytest.mark.parametrize("kwargs", [
    {"zone_index": -1},
    {"datetime_indices": ()},
    {"datetime_indices": (1,)},
    {"min_fields": 2},
    {"delimiter": ",,"},
    {"zone_column": 1},
])
def test_invalid_layout(kwargs):
    with pytest.raises(ValueError):
        RecordLayout.preset("headered", **kwargs)


def test_unknown_layout():
    with pytest.raises(ValueError):
        RecordLayout.preset("auto")


def test_config_from_yaml(tmp_path):
    path = tmp_path / "analyzer.yaml"
    path.write_text(
        "layout:\n"
        "  name: headered\n"
        "  zone_index: 0\n"
        "selection: heap\n"
        "top_zones: 3\n"
        "top_slots: 4\n"
        "log_level: warning\n"
    )
    config = AnalyzerConfig.from_yaml(path)

    assert config.layout.name == "headered"
    assert config.layout.zone_index == 0
    assert config.selection is SelectionStrategy.HEAP
    assert (config.top_zones, config.top_slots) == (3, 4)
    assert config.log_level == "WARNING"


def test_config_defaults_and_layout_name(tmp_path):
    path = tmp_path / "analyzer.yaml"
    path.write_text("layout: headerless\n")
    config = AnalyzerConfig.from_yaml(path)

    assert config.layout == RecordLayout.preset("headerless")
    assert config.selection is SelectionStrategy.PARTITION
    assert (config.top_zones, config.top_slots) == (10, 10)

    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    assert AnalyzerConfig.from_yaml(empty) == AnalyzerConfig()


def test_config_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        AnalyzerConfig.from_yaml(tmp_path / "missing.yaml")

    bad = tmp_path / "bad.yaml"
    bad.write_text("layout: [unclosed\n")
    with pytest.raises(ValueError):
        AnalyzerConfig.from_yaml(bad)

    with pytest.raises(ValueError):
        AnalyzerConfig(top_zones=-1)

    with pytest.raises(ValueError):
        AnalyzerConfig(log_level="LOUD")

    with pytest.raises(ValueError):
        AnalyzerConfig(selection="sort")


@pytest.mark.parametrize("text", [
    "top_zones:\n",
    "top_slots: many\n",
    "layout:\n  name: headered\n  zone_index: x\n",
    "layout:\n  name: headerless\n  datetime_indices: [2, null]\n",
    "layout:\n  name: [headered]\n",
])
def test_config_bad_values_raise_value_error(tmp_path, text):
    path = tmp_path / "analyzer.yaml"
    path.write_text(text)

    with pytest.raises(ValueError):
        AnalyzerConfig.from_yaml(path)


def test_config_numeric_strings_are_coerced(tmp_path):
    path = tmp_path / "analyzer.yaml"
    path.write_text(
        "layout:\n"
        "  name: headerless\n"
        "  zone_index: '0'\n"
        "  datetime_indices: 2\n"
        "top_zones: '3'\n"
    )
    config = AnalyzerConfig.from_yaml(path)

    assert config.layout.zone_index == 0
    assert config.layout.datetime_indices == (2,)
    assert config.top_zones == 3


def test_analyzer_from_config():
    config = AnalyzerConfig(layout=RecordLayout.preset("headerless"), selection="heap")
    analyzer = TripAnalyzer.from_config(config, logger=create_logger("test"))

    assert analyzer.layout.name == "headerless"
    analyzer.ingest_lines(["1,A,2024-01-05 09:15"])
    assert analyzer.top_zones(1) == [ZoneCount("A", 1)]
