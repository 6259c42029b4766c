"""XML Spreadsheet writer - converts Sheets back into workbook markup.

Output mirrors what the parser reads:
1. One Worksheet per sheet, named with ss:Name, in sheet order
2. A header row: placeholder corner cell, then the column titles
3. One row per row title: the title, then every column's value
4. Unset cells are written as the placeholder; cells are always dense,
   so no ss:Index attributes are needed
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from lxml import etree

from services.workbook_config import WorkbookSettings, get_workbook_settings

from .errors import WorkbookWriteError
from .parser import NS, SS
from .sheets import Sheets
from .table import Table

logger = logging.getLogger(__name__)


# Default namespace plus the prefixes Excel writes on the root element
NSMAP = {
    None: NS["ss"],
    "o": NS["o"],
    "x": NS["x"],
    "ss": NS["ss"],
    "html": NS["html"],
}

XML_DECLARATION = '<?xml version="1.0"?>\n'


def _ss(name: str) -> str:
    return f"{{{SS}}}{name}"


def check_cell_text(
    text: str,
    sheet: Optional[str] = None,
    row: Optional[str] = None,
    column: Optional[str] = None,
) -> None:
    """Raise WorkbookWriteError if ``text`` cannot be stored in an XML document."""
    try:
        etree.Element("Data").text = text
    except ValueError as e:
        raise WorkbookWriteError(f"Text cannot be written as XML: {e}", sheet, row, column) from e


def _append_cell(row_el: etree._Element, text: str, literal: bool = False) -> None:
    """Append <Cell><Data ss:Type="String">text</Data></Cell> to a row.

    Titles and values go in CDATA; the placeholder is written as plain text.
    """
    cell_el = etree.SubElement(row_el, _ss("Cell"))
    data_el = etree.SubElement(cell_el, _ss("Data"))
    data_el.set(_ss("Type"), "String")
    # CDATA cannot contain its own terminator, and parsers fold \r inside it to \n
    if literal or not text or "]]>" in text or "\r" in text:
        data_el.text = text
    else:
        data_el.text = etree.CDATA(text)


def _fill_table(
    table_el: etree._Element,
    table: Table,
    settings: WorkbookSettings,
    sheet: Optional[str] = None,
) -> None:
    columns = table.column_titles

    def append(row_el, text, row=None, column=None, literal=False):
        try:
            _append_cell(row_el, text, literal)
        except ValueError as e:
            raise WorkbookWriteError(f"Text cannot be written as XML: {e}", sheet, row, column) from e

    header = etree.SubElement(table_el, _ss("Row"))
    append(header, settings.placeholder, literal=True)
    for column in columns:
        append(header, column, column=column)

    for row in table.row_titles:
        row_el = etree.SubElement(table_el, _ss("Row"))
        append(row_el, row, row=row)
        for column in columns:
            value = table.get_value(row, column)
            if not table.is_set(row, column) or value is None:
                append(row_el, settings.placeholder, row, column, literal=True)
            else:
                append(row_el, str(value), row, column)


def table_to_element(table: Table, settings: Optional[WorkbookSettings] = None) -> etree._Element:
    """Convert a single Table into a standalone <Table> element.

    Raises:
        WorkbookWriteError: If a title or value contains characters XML cannot hold.
    """
    settings = settings or get_workbook_settings()
    table_el = etree.Element(_ss("Table"), nsmap=NSMAP)
    _fill_table(table_el, table, settings)
    return table_el


def workbook_to_element(sheets: Sheets, settings: Optional[WorkbookSettings] = None) -> etree._Element:
    """Build the <Workbook> element tree for all sheets."""
    settings = settings or get_workbook_settings()

    root = etree.Element(_ss("Workbook"), nsmap=NSMAP)
    for name, table in sheets.items():
        worksheet = etree.SubElement(root, _ss("Worksheet"))
        try:
            worksheet.set(_ss("Name"), name)
        except ValueError as e:
            raise WorkbookWriteError(f"Sheet name cannot be written as XML: {e}", sheet=name) from e
        _fill_table(etree.SubElement(worksheet, _ss("Table")), table, settings, sheet=name)

    return root


def workbook_to_xml(sheets: Sheets, settings: Optional[WorkbookSettings] = None) -> str:
    """Serialize Sheets into an XML Spreadsheet document.

    The result starts with the XML declaration and the mso-application
    processing instruction so Excel opens it as a workbook.

    Raises:
        WorkbookWriteError: If a sheet name, title or value contains
            characters XML cannot hold. The error names the cell.
    """
    settings = settings or get_workbook_settings()

    root = workbook_to_element(sheets, settings)
    root.addprevious(etree.ProcessingInstruction("mso-application", 'progid="Excel.Sheet"'))

    body = etree.tostring(root.getroottree(), encoding="unicode", pretty_print=settings.pretty_print)

    logger.info(f"[EXPORT] Serialized {len(sheets)} sheets ({len(body):,} chars)")
    return XML_DECLARATION + body


def write_workbook_file(
    sheets: Sheets,
    path: Union[str, Path],
    settings: Optional[WorkbookSettings] = None,
) -> str:
    """Serialize Sheets and write them to disk. Returns the output path."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(workbook_to_xml(sheets, settings), encoding="utf-8")
    return str(out)
