"""Ordered collection of named tables (one per worksheet)."""

from __future__ import annotations

from typing import Dict, Iterator, List, Tuple, Union

from .errors import LookupKind, SheetIndexError, ValueNotFoundError
from .table import Table


class Sheets:
    """Worksheet tables keyed by sheet name, in document order.

    Usage:
        sheets = parse_workbook_xml(text)
        prices = sheets.get("Prices")      # by name
        first = sheets.get(0)              # by position
        prices.get_value("Apple", "EUR")
    """

    def __init__(self):
        self._tables: Dict[str, Table[str]] = {}

    def add(self, name: str, table: Table[str]) -> bool:
        """Add a sheet. Returns False (and keeps the existing one) if the name is taken."""
        if name in self._tables:
            return False
        self._tables[name] = table
        return True

    def remove(self, name: str) -> None:
        self._tables.pop(name, None)

    def get(self, key: Union[str, int]) -> Table[str]:
        """Get a table by sheet name or by zero-based position.

        Raises:
            ValueNotFoundError: ``NO_TABLE`` if no sheet has that name.
            SheetIndexError: if an integer key is outside ``[0, count)``.
        """
        if isinstance(key, int) and not isinstance(key, bool):
            if key < 0 or key >= len(self._tables):
                raise SheetIndexError(key, len(self._tables))
            return list(self._tables.values())[key]
        if key not in self._tables:
            raise ValueNotFoundError(LookupKind.NO_TABLE, key)
        return self._tables[key]

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._tables)

    def items(self) -> List[Tuple[str, Table[str]]]:
        return list(self._tables.items())

    def __getitem__(self, key: Union[str, int]) -> Table[str]:
        return self.get(key)

    def __contains__(self, name: object) -> bool:
        return name in self._tables

    def __iter__(self) -> Iterator[str]:
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)

    def __repr__(self) -> str:
        return f"Sheets({list(self._tables)!r})"

    def __str__(self) -> str:
        output = ""
        for name, table in self._tables.items():
            output += f"===========  {name}  ===========\n"
            output += str(table)
            output += "\n\n"
        return output
