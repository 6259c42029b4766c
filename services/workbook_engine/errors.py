"""Typed failures raised by the workbook engine.

Lookups raise a ``ValueNotFoundError`` whose ``kind`` tells the caller
which part of the address was missing, so callers can branch on the kind
instead of matching message text.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class WorkbookError(Exception):
    """Base class for all workbook engine errors."""


class LookupKind(str, Enum):
    """What was missing when a lookup failed."""
    NO_TABLE = "NoTable"  # No sheet with that name
    NO_ROW = "NoRow"  # Row title not declared
    NO_COLUMN = "NoColumn"  # Row exists, column title not declared


class ValueNotFoundError(WorkbookError, LookupError):
    """A sheet, row or column lookup failed."""

    def __init__(self, kind: LookupKind, key: Optional[str] = None):
        self.kind = kind
        self.key = key
        message = kind.value if key is None else f"{kind.value}: {key!r}"
        super().__init__(message)


class SheetIndexError(WorkbookError, IndexError):
    """Numeric sheet access outside ``[0, count)``."""

    def __init__(self, index: int, count: int):
        self.index = index
        self.count = count
        super().__init__(f"Sheet index {index} out of range (0..{count - 1})" if count else f"Sheet index {index} out of range (no sheets)")


class WorkbookWriteError(WorkbookError, ValueError):
    """A title or value cannot be represented in XML (e.g. control characters)."""

    def __init__(
        self,
        message: str,
        sheet: Optional[str] = None,
        row: Optional[str] = None,
        column: Optional[str] = None,
    ):
        self.sheet = sheet
        self.row = row
        self.column = column
        where = ", ".join(
            f"{label} {value!r}"
            for label, value in (("sheet", sheet), ("row", row), ("column", column))
            if value is not None
        )
        super().__init__(f"{message} ({where})" if where else message)


class WorkbookParseError(WorkbookError, ValueError):
    """The input text is not a well-formed workbook document."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)
