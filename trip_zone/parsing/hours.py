"""
Hour Extractor
==============

Pulls the hour of day (0-23) out of a loosely formatted date-time field
of the shape "<date> <anything> H:MM". The date part is never inspected.

Accepted:  "2024-01-05 9:07", "2024-01-05 09:07", "2024-01-05  9 :05",
           "2024-01-05 23:59:59"
Rejected:  "2024-01-05 24:00", "2024-01-05 9:7", "2024-01-05T09:07",
           "no-time-here"
"""

from typing import Optional

from trip_zone.parsing.fields import FieldRange, trim_range

DIGITS = frozenset("0123456789")

MAX_HOUR = 23
MAX_MINUTE = 59


def extract_hour(text: str, begin: int = 0, end: Optional[int] = None) -> Optional[int]:
    """
    Extract the hour from text[begin:end] without slicing it.

    Steps (each failure aborts with None):
    1. Trim the range; empty means no hour.
    2. First space in the range separates date from time.
    3. First colon after that space.
    4. Two ASCII digits after the colon, forming a minute 0-59.
    5. Walking back from the colon past whitespace, the units digit of the
       hour; the character right before it is the tens digit if numeric.
       Both digits must sit after the date/time space.
    6. Hour must be 0-23.

    Args:
        text: Line or field text
        begin: Range start offset
        end: Range end offset (default: len(text))

    Returns:
        Hour in [0, 23], or None if the range holds no valid time
    """
    if end is None or end > len(text):
        end = len(text)
    begin, end = trim_range(text, FieldRange(max(begin, 0), end))
    if begin >= end:
        return None

    space = text.find(" ", begin, end)
    if space == -1:
        return None

    colon = text.find(":", space + 1, end)
    if colon == -1:
        return None

    m0 = colon + 1
    if m0 + 1 >= end:
        return None
    if text[m0] not in DIGITS or text[m0 + 1] not in DIGITS:
        return None
    minute = int(text[m0]) * 10 + int(text[m0 + 1])
    if minute > MAX_MINUTE:
        return None

    i = colon - 1
    while i > space and text[i].isspace():
        i -= 1
    if i <= space or text[i] not in DIGITS:
        return None
    hour = int(text[i])

    tens = i - 1
    if tens > space and text[tens] in DIGITS:
        hour = int(text[tens]) * 10 + hour

    if hour > MAX_HOUR:
        return None
    return hour
