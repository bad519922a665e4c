"""
Line Field Splitter
===================

Pure range computation over one delimited record line.

Design:
- Delimiter positions located once per line, reused for every lookup
- Fields addressed as half-open [begin, end) offsets into the line
- No copying until a caller asks for the field text
- Failures are None, never exceptions (caller skips the record)
"""

from typing import NamedTuple, Optional, Sequence, Tuple

DEFAULT_DELIMITER = ","


class FieldRange(NamedTuple):
    """Half-open [begin, end) offsets of one field within a line."""

    begin: int
    end: int

    @property
    def is_empty(self) -> bool:
        return self.begin >= self.end


def locate_delimiters(line: str, delimiter: str = DEFAULT_DELIMITER) -> Tuple[int, ...]:
    """
    Find every delimiter position in a line, left to right.

    Args:
        line: One record line (without terminator)
        delimiter: Single separator character

    Returns:
        Tuple of delimiter offsets, in ascending order
    """
    positions = []
    pos = line.find(delimiter)
    while pos != -1:
        positions.append(pos)
        pos = line.find(delimiter, pos + 1)
    return tuple(positions)


def field_range(
    line: str,
    delimiters: Sequence[int],
    index: int
) -> Optional[FieldRange]:
    """
    Resolve the boundaries of field `index` (0-based).

    The last field ends at the line length, not at a delimiter.

    Returns:
        FieldRange, or None when the line has fewer than index+1 fields
    """
    if index < 0 or index - 1 >= len(delimiters):
        return None

    begin = 0 if index == 0 else delimiters[index - 1] + 1
    end = delimiters[index] if index < len(delimiters) else len(line)
    return FieldRange(begin, end)


def trim_range(line: str, rng: FieldRange) -> FieldRange:
    """Shrink a range past leading and trailing whitespace."""
    begin, end = rng
    while begin < end and line[begin].isspace():
        begin += 1
    while end > begin and line[end - 1].isspace():
        end -= 1
    return FieldRange(begin, end)


def field_text(
    line: str,
    delimiters: Sequence[int],
    index: int
) -> Optional[str]:
    """
    Trimmed text of field `index`.

    Returns:
        The field text, or None if the field is missing or blank
    """
    rng = field_range(line, delimiters, index)
    if rng is None:
        return None

    rng = trim_range(line, rng)
    if rng.is_empty:
        return None
    return line[rng.begin:rng.end]
