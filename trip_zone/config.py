"""
Configuration schema for the trip zone analyzer.

This module defines the record layouts (which field carries the pickup
zone, which carries the pickup date-time, whether a header line comes
first) and the analyzer settings loaded from YAML.

Layouts are chosen explicitly, never auto-detected:

- headerless: no header line; zone is field 1; the date-time is field 2
  (3-column files) or field 3 (6-column files with a dropoff zone in
  between), tried in that order, first success wins.
- headered: the first line is always discarded as a header; records are
  trip id, pickup zone, dropoff zone, pickup date-time, distance, fare,
  so zone is field 1 and the date-time is field 3.
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from trip_zone.analytics.ranking import SelectionStrategy

LAYOUT_PRESETS: Dict[str, Dict[str, Any]] = {
    "headerless": {
        "has_header": False,
        "zone_index": 1,
        "datetime_indices": (2, 3),
        "min_fields": 3,
    },
    "headered": {
        "has_header": True,
        "zone_index": 1,
        "datetime_indices": (3,),
        "min_fields": 6,
    },
}

DEFAULT_LAYOUT = "headered"

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _as_int(name: str, value: Any) -> int:
    """Coerce a config value to int, raising ValueError for empty or non-numeric values."""
    if value is None or isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e


def _as_indices(value: Any) -> Tuple[int, ...]:
    """Coerce a single index or a list of indices to a tuple of ints."""
    if value is None or isinstance(value, (int, str)):
        value = (value,)
    try:
        items = list(value)
    except TypeError as e:
        raise ValueError(f"datetime_indices must be a list of integers, got {value!r}") from e
    return tuple(_as_int("datetime_indices", index) for index in items)


@dataclass(frozen=True)
class RecordLayout:
    """
    Fixed assignment of field indices for one dataset format variant.

    Attributes:
        name: Variant tag ("headered", "headerless")
        has_header: Discard the first line unconditionally
        zone_index: 0-based index of the pickup zone field
        datetime_indices: Date-time field candidates, tried in order
        min_fields: Records with fewer fields are skipped
        delimiter: Single separator character
    """

    name: str
    has_header: bool
    zone_index: int
    datetime_indices: Tuple[int, ...]
    min_fields: int
    delimiter: str = ","

    def __post_init__(self):
        """Validate layout."""
        object.__setattr__(self, "zone_index", _as_int("zone_index", self.zone_index))
        object.__setattr__(self, "min_fields", _as_int("min_fields", self.min_fields))
        object.__setattr__(self, "datetime_indices", _as_indices(self.datetime_indices))

        if not isinstance(self.delimiter, str) or len(self.delimiter) != 1:
            raise ValueError(
                f"delimiter must be a single character, got {self.delimiter!r}"
            )

        if self.zone_index < 0:
            raise ValueError(f"zone_index must be >= 0, got {self.zone_index}")

        if not self.datetime_indices:
            raise ValueError(
                f"Layout '{self.name}' needs at least one date-time field index"
            )

        if any(index < 0 for index in self.datetime_indices):
            raise ValueError(
                f"datetime_indices must be >= 0, got {self.datetime_indices}"
            )

        if self.zone_index in self.datetime_indices:
            raise ValueError(
                f"zone_index {self.zone_index} overlaps datetime_indices "
                f"{self.datetime_indices}"
            )

        required = self.required_fields()
        if self.min_fields < required:
            raise ValueError(
                f"min_fields must be >= {required} for layout '{self.name}', "
                f"got {self.min_fields}"
            )

    def required_fields(self) -> int:
        """Fields needed to reach the zone and the first date-time candidate."""
        return max(self.zone_index, self.datetime_indices[0]) + 1

    @classmethod
    def preset(cls, name: str, **overrides: Any) -> "RecordLayout":
        """
        Build a named layout, optionally overriding field indices.

        Args:
            name: "headered" or "headerless"
            **overrides: Any RecordLayout field; None values are ignored

        Raises:
            ValueError: Unknown preset or invalid overrides

        Example:
            >>> RecordLayout.preset("headered", zone_index=0)
        """
        if not isinstance(name, str) or name not in LAYOUT_PRESETS:
            raise ValueError(
                f"Unknown layout: {name}. Must be one of {sorted(LAYOUT_PRESETS)}"
            )

        unknown = set(overrides) - {f.name for f in fields(cls)}
        if unknown:
            raise ValueError(f"Unknown layout settings: {sorted(unknown)}")

        values = dict(LAYOUT_PRESETS[name])
        values.update({key: value for key, value in overrides.items() if value is not None})

        if overrides.get("min_fields") is None:
            zone_index = _as_int("zone_index", values["zone_index"])
            indices = _as_indices(values["datetime_indices"])
            if indices:
                values["min_fields"] = max(
                    values["min_fields"], zone_index + 1, indices[0] + 1
                )

        return cls(name=name, **values)


@dataclass(frozen=True)
class AnalyzerConfig:
    """
    Main configuration for a report run.

    Loaded from YAML and/or CLI flags, validated at construction.
    """

    layout: RecordLayout = field(default_factory=lambda: RecordLayout.preset(DEFAULT_LAYOUT))
    selection: SelectionStrategy = SelectionStrategy.PARTITION
    top_zones: int = 10
    top_slots: int = 10
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate analyzer configuration."""
        object.__setattr__(self, "selection", SelectionStrategy(self.selection))
        object.__setattr__(self, "log_level", str(self.log_level).upper())
        object.__setattr__(self, "top_zones", _as_int("top_zones", self.top_zones))
        object.__setattr__(self, "top_slots", _as_int("top_slots", self.top_slots))

        if self.top_zones < 0:
            raise ValueError(f"top_zones must be >= 0, got {self.top_zones}")

        if self.top_slots < 0:
            raise ValueError(f"top_slots must be >= 0, got {self.top_slots}")

        if self.log_level not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level: {self.log_level}. Must be one of {sorted(LOG_LEVELS)}"
            )

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AnalyzerConfig":
        """
        Build configuration from a parsed mapping.

        The layout entry may be a preset name or a mapping with a `name`
        key plus field overrides.
        """
        data = data or {}

        layout_data: Union[str, Dict[str, Any], None] = data.get("layout", DEFAULT_LAYOUT)
        if isinstance(layout_data, str):
            layout = RecordLayout.preset(layout_data)
        elif isinstance(layout_data, dict):
            overrides = dict(layout_data)
            name = overrides.pop("name", DEFAULT_LAYOUT)
            layout = RecordLayout.preset(name, **overrides)
        else:
            raise ValueError(f"layout must be a name or a mapping, got {layout_data!r}")

        return cls(
            layout=layout,
            selection=data.get("selection", SelectionStrategy.PARTITION.value),
            top_zones=data.get("top_zones", 10),
            top_slots=data.get("top_slots", 10),
            log_level=data.get("log_level", "INFO"),
        )

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "AnalyzerConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            layout:
              name: "headered"
              zone_index: 1
            selection: "partition"
            top_zones: 10
            top_slots: 10
            log_level: "INFO"

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If YAML is invalid or values fail validation
        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {yaml_path}: {e}") from e

        if data is not None and not isinstance(data, dict):
            raise ValueError(f"Config root in {yaml_path} must be a mapping")

        return cls.from_dict(data)
