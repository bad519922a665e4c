"""
Parsing Layer
=============

Bounded Context: Record line parsing (pure, stateless).

Responsibilities:
- Locate delimiters and resolve field ranges
- Trim ranges without copying
- Extract the hour of day from loose date-time fields
"""

from trip_zone.parsing.fields import (
    FieldRange,
    locate_delimiters,
    field_range,
    trim_range,
    field_text,
)
from trip_zone.parsing.hours import extract_hour

__all__ = [
    "FieldRange",
    "locate_delimiters",
    "field_range",
    "trim_range",
    "field_text",
    "extract_hour",
]
