"""
Conversion of RouterOS field values into numbers.
"""

import re
from typing import Tuple

from mikrotik_exporter.errors import ParseError

_DURATION_RE = re.compile(r"(?:(\d+)w)?(?:(\d+)d)?(?:(\d+)h)?(?:(\d+)m)?(?:(\d+)s)?")

# Seconds per unit, in the order the units appear in a RouterOS duration
_DURATION_UNITS = (7 * 86400, 86400, 3600, 60, 1)


def parse_duration(duration: str) -> float:
    """
    Convert a RouterOS duration such as ``1w2d3h4m5s`` into seconds.

    Every unit is optional but they must appear in ``w d h m s`` order.
    An empty string is zero seconds.

    Raises:
        ParseError: if the value is not made of recognized unit parts
    """
    match = _DURATION_RE.fullmatch(duration)
    if match is None:
        raise ParseError(f"invalid duration value: {duration!r}", value=duration)

    return float(
        sum(int(part) * unit for part, unit in zip(match.groups(), _DURATION_UNITS) if part)
    )


def split_string_to_floats(metric: str) -> Tuple[float, float]:
    """
    Split a ``tx,rx`` style value into two floats.

    Raises:
        ParseError: if either side is not numeric; ``placeholders`` on the
            error holds ``(nan, nan)`` for callers that emit anyway
    """
    parts = metric.split(",")
    if len(parts) != 2:
        raise ParseError.for_pair(f"expected two comma separated values: {metric!r}", metric)

    try:
        return float(parts[0]), float(parts[1])
    except ValueError as e:
        raise ParseError.for_pair(f"invalid numeric pair {metric!r}: {e}", metric) from e


def parse_bool(value: str) -> float:
    """RouterOS ``true``/``yes`` as 1.0, anything else as 0.0."""
    return 1.0 if value.lower() in ("true", "yes") else 0.0


def parse_float(value: str) -> float:
    """
    Parse a numeric field.

    Raises:
        ParseError: if the value is not a number
    """
    try:
        return float(value)
    except ValueError as e:
        raise ParseError(f"invalid numeric value: {value!r}", value=value) from e
