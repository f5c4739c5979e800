"""Global name table: ordered, unique strings addressed by position."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Union

from .errors import index_out_of_range
from .primitives import NameIndex, NameIndexFlagged

__all__ = ["Names", "NameKey"]

NameKey = Union[int, NameIndex, NameIndexFlagged]


class Names:
    """Insertion-ordered string set; the position of a string is its index.

    Tables decoded from disk are kept verbatim so indices stay stable. If a
    file carries a repeated string, lookups by value resolve to its first
    position and :func:`assetreg.inspector.validate_registry` reports it.
    """

    def __init__(self, values: Iterable[str] = ()):
        self._values: List[str] = []
        self._positions: Dict[str, int] = {}
        for value in values:
            self._append(value)

    def _append(self, value: str) -> int:
        index = len(self._values)
        self._values.append(value)
        self._positions.setdefault(value, index)
        return index

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __contains__(self, value: object) -> bool:
        return value in self._positions

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Names):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:  # pragma: no cover
        return f"Names({len(self._values)} entries)"

    def __getitem__(self, key: NameKey) -> str:
        index = key if isinstance(key, int) else key.index
        if not 0 <= index < len(self._values):
            raise index_out_of_range(
                f"Name index {index} outside table of {len(self._values)}",
                {"index": index, "size": len(self._values)},
            )
        return self._values[index]

    def index_of(self, value: str) -> Optional[int]:
        return self._positions.get(value)

    def intern(self, value: str) -> NameIndexFlagged:
        """Return the index of ``value``, appending it when not yet present."""
        index = self._positions.get(value)
        if index is None:
            index = self._append(value)
        return NameIndexFlagged(index)

    def duplicates(self) -> List[str]:
        return [
            v for i, v in enumerate(self._values) if self._positions[v] != i
        ]
