"""Sparse table addressed by row and column titles.

Titles are kept in insertion order. Cell values live in a flat dict keyed
by ``(row, column)``; a declared pair without an entry reads as the table's
default, which gives every row a value for every column without storing
the backfill.
"""

from __future__ import annotations

from typing import Dict, Generic, List, Optional, Tuple, TypeVar

from .errors import LookupKind, ValueNotFoundError

T = TypeVar("T")


class Table(Generic[T]):
    """A table whose cells are addressed by (row title, column title)."""

    def __init__(self, default: Optional[T] = None):
        self.default = default
        # dicts double as insertion-ordered sets
        self._rows: Dict[str, None] = {}
        self._columns: Dict[str, None] = {}
        self._cells: Dict[Tuple[str, str], T] = {}

    # -------------------------------------------------------------------------
    # Titles
    # -------------------------------------------------------------------------

    @property
    def row_titles(self) -> Tuple[str, ...]:
        """All row titles, in the order they were first added."""
        return tuple(self._rows)

    @property
    def column_titles(self) -> Tuple[str, ...]:
        """All column titles, in the order they were first added."""
        return tuple(self._columns)

    def has_row(self, title: str) -> bool:
        return title in self._rows

    def has_column(self, title: str) -> bool:
        return title in self._columns

    def add_row(self, title: str) -> None:
        """Add an empty row. Does nothing if the row already exists."""
        self._rows.setdefault(title, None)

    def add_column(self, title: str) -> None:
        """Add an empty column. Does nothing if the column already exists."""
        self._columns.setdefault(title, None)

    def remove_row(self, title: str) -> None:
        """Remove a row and all of its cells."""
        if title not in self._rows:
            return
        del self._rows[title]
        for column in self._columns:
            self._cells.pop((title, column), None)

    def remove_column(self, title: str) -> None:
        """Remove a column and all of its cells."""
        if title not in self._columns:
            return
        del self._columns[title]
        for row in self._rows:
            self._cells.pop((row, title), None)

    # -------------------------------------------------------------------------
    # Cells
    # -------------------------------------------------------------------------

    def _check_address(self, row: str, column: str) -> None:
        if row not in self._rows:
            raise ValueNotFoundError(LookupKind.NO_ROW, row)
        if column not in self._columns:
            raise ValueNotFoundError(LookupKind.NO_COLUMN, column)

    def get_value(self, row: str, column: str) -> Optional[T]:
        """Get the value at (row, column).

        Returns the table default for cells that were never set.

        Raises:
            ValueNotFoundError: ``NO_ROW`` if the row is unknown, ``NO_COLUMN``
                if the row exists but the column does not.
        """
        self._check_address(row, column)
        return self._cells.get((row, column), self.default)

    def set_value(self, row: str, column: str, value: T) -> None:
        """Set the value at (row, column), creating the row and column if needed."""
        self.add_row(row)
        self.add_column(column)
        self._cells[(row, column)] = value

    def is_set(self, row: str, column: str) -> bool:
        """True if a value was explicitly stored at (row, column)."""
        self._check_address(row, column)
        return (row, column) in self._cells

    def clear_value(self, row: str, column: str) -> None:
        """Return a cell to the unset state."""
        self._check_address(row, column)
        self._cells.pop((row, column), None)

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def to_rows(self) -> List[List[Optional[T]]]:
        """Header row (corner + column titles) followed by one list per row.

        Unset cells are None regardless of the table default.
        """
        columns = self.column_titles
        grid: List[List[Optional[T]]] = [[None, *columns]]
        for row in self._rows:
            grid.append([row, *(self._cells.get((row, c)) for c in columns)])
        return grid

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"Table(rows={len(self._rows)}, columns={len(self._columns)})"

    def __str__(self) -> str:
        """Tab-separated grid; unset cells print as a single space."""
        lines = ["".join(f"\t{column}" for column in self._columns)]
        for row in self._rows:
            parts = [row]
            for column in self._columns:
                value = self._cells.get((row, column), self.default)
                parts.append(" " if value is None else str(value))
            lines.append("\t".join(parts))
        return "\n".join(lines)
