"""
Sortable view over the database records returned by ``/api/stats``.
"""

import locale
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Tuple

from ..probes.sizes import parse_size_bytes


class SortColumn(str, Enum):
    NAME = "name"
    SIZE = "size"
    CONNECTIONS = "connections"


class SortDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"

    @property
    def arrow(self) -> str:
        return "↑" if self is SortDirection.ASCENDING else "↓"

    def flipped(self) -> "SortDirection":
        if self is SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING


@dataclass(frozen=True)
class SortState:
    """Current column and direction of the database table."""
    column: SortColumn = SortColumn.NAME
    direction: SortDirection = SortDirection.ASCENDING

    def toggle(self, column) -> "SortState":
        """State after clicking ``column``'s header.

        Clicking the active column flips the direction; clicking another
        column selects it in ascending order.
        """
        column = SortColumn(column)
        if column is self.column:
            return SortState(column, self.direction.flipped())
        return SortState(column, SortDirection.ASCENDING)


def _value(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _name_key(record: Any) -> Tuple[str, str]:
    """Accent- and case-insensitive key; ties fall back to the active collation."""
    folded = str(_value(record, "name") or "").casefold()
    base = "".join(c for c in unicodedata.normalize("NFKD", folded) if not unicodedata.combining(c))
    return base, locale.strxfrm(folded)


def _size_key(record: Any) -> float:
    return parse_size_bytes(_value(record, "size"))


def _connections_key(record: Any) -> int:
    try:
        return int(_value(record, "connections"))
    except (TypeError, ValueError):
        return 0


SORT_KEYS: Dict[SortColumn, Callable[[Any], Any]] = {
    SortColumn.NAME: _name_key,
    SortColumn.SIZE: _size_key,
    SortColumn.CONNECTIONS: _connections_key,
}


def sort_records(records: Iterable[Any], state: SortState) -> List[Any]:
    """Return a new list ordered by ``state``; the input is left untouched."""
    return sorted(
        records,
        key=SORT_KEYS[state.column],
        reverse=state.direction is SortDirection.DESCENDING,
    )
