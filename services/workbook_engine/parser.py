"""XML Spreadsheet parser - converts workbook markup into Sheets.

Walks Workbook -> Worksheet -> Table -> Row -> Cell:
- The first row of each table holds the column titles
- The first cell of every other row holds the row title
- ss:Index attributes reposition the column cursor over skipped cells
- Rows with a blank or already-used title are dropped
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from lxml import etree

from services.workbook_config import WorkbookSettings, get_workbook_settings

from .errors import WorkbookParseError
from .sheets import Sheets
from .table import Table

logger = logging.getLogger(__name__)


# =============================================================================
# NAMESPACES
# =============================================================================

NS = {
    "ss": "urn:schemas-microsoft-com:office:spreadsheet",
    "o": "urn:schemas-microsoft-com:office:office",
    "x": "urn:schemas-microsoft-com:office:excel",
    "html": "http://www.w3.org/TR/REC-html40",
}

SS = NS["ss"]


# =============================================================================
# UTILITIES
# =============================================================================

def _local_name(node) -> Optional[str]:
    """Lower-cased local tag name, or None for comments and processing instructions."""
    if not isinstance(node.tag, str):
        return None
    return etree.QName(node).localname.lower()


def _children_named(parent, name: str) -> List[etree._Element]:
    """Direct children whose local tag name matches ``name`` case-insensitively."""
    return [child for child in parent if _local_name(child) == name]


def _ss_attribute(element, name: str) -> Optional[str]:
    """Read ``ss:<name>``, falling back to the unqualified attribute."""
    value = element.get(f"{{{SS}}}{name}")
    if value is None:
        value = element.get(name)
    return value


def _find_data(cell) -> Optional[etree._Element]:
    """Find the text payload element of a cell.

    Looks for a ``Data`` child in the cell's own namespace first, then for
    an ``ss:Data`` child.
    """
    own_ns = etree.QName(cell).namespace
    data = cell.find(f"{{{own_ns}}}Data" if own_ns else "Data")
    if data is None:
        data = cell.find(f"{{{SS}}}Data")
    return data


def cell_text(cell) -> Optional[str]:
    """Text payload of a cell, or None if the cell has no Data element.

    Inline formatting inside Data (e.g. html:B) is flattened to its text.
    """
    data = _find_data(cell)
    if data is None:
        return None
    return str(data.xpath("string()"))


def _load_root(text: Union[str, bytes]):
    if not text.strip():
        raise WorkbookParseError("Malformed workbook XML: document is empty")

    if isinstance(text, str):
        # Encoding declarations don't apply to already-decoded text
        parser = etree.XMLParser(encoding="utf-8", resolve_entities=False, no_network=True)
        data = text.encode("utf-8")
    else:
        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        data = text

    try:
        root = etree.fromstring(data, parser)
    except etree.XMLSyntaxError as e:
        line, column = e.position if e.position else (None, None)
        raise WorkbookParseError(f"Malformed workbook XML: {e.msg}", line, column) from e

    if _local_name(root) != "workbook":
        raise WorkbookParseError(f"Root element is <{etree.QName(root).localname}>, expected <Workbook>")
    return root


# =============================================================================
# ROWS
# =============================================================================

def _parse_header_row(row, table: Table[str]) -> List[str]:
    """Collect column titles from the header row.

    The first cell is the reserved corner. Cells without a Data element
    are skipped and do not take up a column position.
    """
    columns: List[str] = []
    for cell in _children_named(row, "cell")[1:]:
        title = cell_text(cell)
        if title is None:
            continue
        columns.append(title)
        table.add_column(title)
    return columns


def _parse_data_row(row, columns: List[str], table: Table[str], settings: WorkbookSettings) -> Optional[str]:
    """Store one data row in the table. Returns the row title, or None if the row was dropped."""
    cells = _children_named(row, "cell")
    if not cells:
        return None

    title = cell_text(cells[0])
    if title is None or title.strip() == "":
        logger.debug(f"[PARSE] Skipping row without title (line {row.sourceline})")
        return None
    if table.has_row(title):
        logger.debug(f"[PARSE] Skipping duplicate row {title!r} (line {row.sourceline})")
        return None

    table.add_row(title)

    # The corner cell is position 1 in ss:Index numbering, the first column is 2
    cursor = 0
    for cell in cells[1:]:
        repositioned = False
        index_attr = _ss_attribute(cell, "Index")
        if index_attr is not None:
            try:
                desired = int(index_attr.strip()) - 2
            except ValueError:
                logger.debug(f"[PARSE] Ignoring non-numeric ss:Index={index_attr!r} in row {title!r}")
            else:
                if 0 <= desired < len(columns):
                    cursor = desired
                    repositioned = True
                else:
                    logger.debug(f"[PARSE] Ignoring out-of-range ss:Index={index_attr} in row {title!r}")

        if cursor >= len(columns):
            continue

        value = cell_text(cell)
        if value is not None and settings.treat_placeholder_as_blank and value == settings.placeholder:
            value = None

        if value is not None:
            table.set_value(title, columns[cursor], value)
            cursor += 1
        elif settings.blank_cells_advance_cursor or repositioned:
            cursor += 1

    return title


# =============================================================================
# SHEETS
# =============================================================================

def parse_worksheet(worksheet, settings: Optional[WorkbookSettings] = None) -> Table[str]:
    """Parse a single <Worksheet> element into a Table."""
    settings = settings or get_workbook_settings()
    table: Table[str] = Table()

    inner = _children_named(worksheet, "table")
    if not inner:
        return table

    columns: Optional[List[str]] = None
    for row in _children_named(inner[0], "row"):
        if columns is None:
            columns = _parse_header_row(row, table)
        else:
            _parse_data_row(row, columns, table, settings)

    return table


def parse_workbook_xml(text: Union[str, bytes], settings: Optional[WorkbookSettings] = None) -> Sheets:
    """Parse an XML Spreadsheet document into Sheets.

    Args:
        text: The workbook markup, as text or raw bytes.
        settings: Parser settings (defaults to the environment settings).

    Returns:
        Sheets in document order. Unnamed worksheets are named by their
        zero-based position among worksheets.

    Raises:
        WorkbookParseError: If the markup is not well-formed or the root is
            not a Workbook. No partial result is returned.
    """
    settings = settings or get_workbook_settings()

    if len(text) > settings.max_document_chars:
        raise WorkbookParseError(
            f"Document too large: {len(text):,} > {settings.max_document_chars:,} characters"
        )

    root = _load_root(text)
    sheets = Sheets()

    sheet_counter = 0
    for worksheet in _children_named(root, "worksheet"):
        name = _ss_attribute(worksheet, "Name")
        if name is None:
            name = str(sheet_counter)
        sheet_counter += 1

        table = parse_worksheet(worksheet, settings)
        if not sheets.add(name, table):
            logger.warning(f"[PARSE] Dropping worksheet {name!r}: name already used by an earlier sheet")
            continue

        logger.debug(
            f"[PARSE] Sheet {name!r}: {len(table.row_titles)} rows, {len(table.column_titles)} columns"
        )

    logger.info(f"[PARSE] Parsed workbook with {len(sheets)} sheets: {list(sheets.names)}")
    return sheets


def parse_workbook_file(path: Union[str, Path], settings: Optional[WorkbookSettings] = None) -> Sheets:
    """Read a workbook file from disk and parse it."""
    return parse_workbook_xml(Path(path).read_bytes(), settings)
