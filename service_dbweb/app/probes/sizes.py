"""
Human readable byte sizes.

``format_size`` and ``parse_size_bytes`` share one unit table so that a size
rendered by the relational probe sorts by magnitude once parsed back.
"""

import re
from typing import Any

SIZE_UNITS = (
    ("kB", 1024),
    ("MB", 1024 ** 2),
    ("GB", 1024 ** 3),
    ("TB", 1024 ** 4),
)

_UNIT_FACTORS = {unit.upper(): factor for unit, factor in SIZE_UNITS}
_UNIT_FACTORS.update({"B": 1, "BYTES": 1})

_SIZE_RE = re.compile(r"^([\d.]+)\s*(bytes|B|kB|MB|GB|TB)?$", re.IGNORECASE)


def format_size(num_bytes: int) -> str:
    """Render a byte count with the largest unit that keeps it at or above 1."""
    if num_bytes < 1024:
        return f"{int(num_bytes)} bytes"

    value = float(num_bytes)
    label = "bytes"
    for unit, factor in SIZE_UNITS:
        if num_bytes < factor:
            break
        value = num_bytes / factor
        label = unit
    return f"{value:.1f} {label}"


def parse_size_bytes(text: Any) -> float:
    """Parse strings like ``"158 MB"`` or ``"9705 kB"`` back to a byte count.

    Anything that does not look like a size (``None``, ``"N/A"``, ``"—"``)
    parses to 0 so it sorts first in ascending order.
    """
    if not isinstance(text, str):
        return 0.0
    match = _SIZE_RE.match(text.strip())
    if not match:
        return 0.0
    try:
        number = float(match.group(1))
    except ValueError:
        return 0.0
    unit = (match.group(2) or "B").upper()
    return number * _UNIT_FACTORS[unit]
