"""Workbook Engine - XML Spreadsheet to Sheets and back.

This module handles:
1. Parsing XML Spreadsheet (Excel 2003 XML) documents into Sheets of Tables
   addressed by row and column titles
2. Editing tables in memory
3. Serializing Sheets back into workbook markup
"""

from .errors import (
    LookupKind,
    SheetIndexError,
    ValueNotFoundError,
    WorkbookError,
    WorkbookParseError,
    WorkbookWriteError,
)
from .table import Table
from .sheets import Sheets
from .schemas import (
    CellValueJSON,
    RowJSON,
    SheetJSON,
    WorkbookJSON,
    sheets_from_json,
    sheets_to_json,
)
from .parser import parse_workbook_file, parse_workbook_xml, parse_worksheet
from .writer import (
    check_cell_text,
    table_to_element,
    workbook_to_xml,
    write_workbook_file,
)

__all__ = [
    # Errors
    "WorkbookError",
    "LookupKind",
    "ValueNotFoundError",
    "SheetIndexError",
    "WorkbookParseError",
    "WorkbookWriteError",
    # Data structures
    "Table",
    "Sheets",
    # JSON view
    "WorkbookJSON",
    "SheetJSON",
    "RowJSON",
    "CellValueJSON",
    "sheets_to_json",
    "sheets_from_json",
    # Functions
    "parse_workbook_xml",
    "parse_workbook_file",
    "parse_worksheet",
    "workbook_to_xml",
    "write_workbook_file",
    "table_to_element",
    "check_cell_text",
]
