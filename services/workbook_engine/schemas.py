"""Pydantic schemas for the JSON view of a workbook.

These mirror Sheets/Table one-to-one so a workbook can travel through an
HTTP API and come back without losing titles, order, or unset cells
(unset cells are ``null``).
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .sheets import Sheets
from .table import Table


class RowJSON(BaseModel):
    """One data row: its title and the value per column title."""
    title: str
    cells: Dict[str, Optional[str]] = {}  # column title -> value (null = unset)


class SheetJSON(BaseModel):
    """A single worksheet."""
    name: str
    column_titles: List[str] = []
    rows: List[RowJSON] = []

    def get_row(self, title: str) -> Optional[RowJSON]:
        """Get a row by title."""
        for row in self.rows:
            if row.title == title:
                return row
        return None


class WorkbookJSON(BaseModel):
    """Top-level JSON representation of a workbook."""
    id: Optional[str] = None
    sheets: List[SheetJSON] = Field(default_factory=list)

    def get_sheet(self, name: str) -> Optional[SheetJSON]:
        """Get a sheet by name."""
        for sheet in self.sheets:
            if sheet.name == name:
                return sheet
        return None


class CellValueJSON(BaseModel):
    """A single addressed cell value."""
    sheet: str
    row: str
    column: str
    value: Optional[str] = None
    is_set: bool = False


# =============================================================================
# CONVERSION
# =============================================================================

def table_to_json(name: str, table: Table) -> SheetJSON:
    header, *body = table.to_rows()
    columns = header[1:]
    rows = [
        RowJSON(
            title=title,
            cells={c: None if v is None else str(v) for c, v in zip(columns, values)},
        )
        for title, *values in body
    ]
    return SheetJSON(name=name, column_titles=columns, rows=rows)


def sheets_to_json(sheets: Sheets, workbook_id: Optional[str] = None) -> WorkbookJSON:
    """Convert Sheets into the JSON view."""
    return WorkbookJSON(
        id=workbook_id,
        sheets=[table_to_json(name, table) for name, table in sheets.items()],
    )


def sheets_from_json(workbook: WorkbookJSON) -> Sheets:
    """Build Sheets from the JSON view.

    Column order comes from ``column_titles``; a row may mention a column
    that is not listed there, in which case the column is appended.
    Duplicate sheet names keep the first sheet.
    """
    sheets = Sheets()
    for sheet in workbook.sheets:
        table: Table[str] = Table()
        for column in sheet.column_titles:
            table.add_column(column)
        for row in sheet.rows:
            if table.has_row(row.title):
                continue
            table.add_row(row.title)
            for column, value in row.cells.items():
                if value is None:
                    if not table.has_column(column):
                        table.add_column(column)
                else:
                    table.set_value(row.title, column, value)
        sheets.add(sheet.name, table)
    return sheets
