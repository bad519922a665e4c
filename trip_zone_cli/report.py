"""
Report formatting for the trip zone CLI.

Text format:

    TOP_ZONES
    zone,count
    ...

    TOP_SLOTS
    zone,hour,count
    ...
"""

import json
from typing import List, Optional, Sequence

from trip_zone import IngestReport, SlotCount, ZoneCount


def format_text(zones: Sequence[ZoneCount], slots: Sequence[SlotCount]) -> str:
    lines: List[str] = ["TOP_ZONES"]
    lines.extend(str(entry) for entry in zones)
    lines.append("")
    lines.append("TOP_SLOTS")
    lines.extend(str(entry) for entry in slots)
    return "\n".join(lines) + "\n"


def format_json(
    zones: Sequence[ZoneCount],
    slots: Sequence[SlotCount],
    ingest: Optional[IngestReport] = None
) -> str:
    """Serialize both rankings (and the ingest summary) as one JSON document."""
    payload = {
        'top_zones': [entry.to_dict() for entry in zones],
        'top_slots': [entry.to_dict() for entry in slots],
    }
    if ingest is not None:
        payload['ingest'] = ingest.to_dict()
    return json.dumps(payload, indent=2) + "\n"
