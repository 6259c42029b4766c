"""API routes for XML Spreadsheet workbooks.

- Upload workbook XML -> parse to Sheets (kept in memory)
- Read and edit cells by row/column title
- Export back to workbook XML
"""
from __future__ import annotations

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response
from pydantic import BaseModel

from services.workbook_engine import (
    CellValueJSON,
    SheetIndexError,
    Sheets,
    Table,
    ValueNotFoundError,
    WorkbookJSON,
    WorkbookParseError,
    WorkbookWriteError,
    check_cell_text,
    parse_workbook_xml,
    sheets_from_json,
    sheets_to_json,
    workbook_to_xml,
)
from services.workbook_engine.schemas import table_to_json


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workbooks", tags=["workbooks"])

# In-memory storage for active workbooks
_active_workbooks: dict[str, Sheets] = {}

XML_MEDIA_TYPE = "application/xml"


# =============================================================================
# MODELS
# =============================================================================

class CellEditRequest(BaseModel):
    """Request to set a cell value. A null value clears the cell."""
    row: str
    column: str
    value: Optional[str] = None


# =============================================================================
# HELPERS
# =============================================================================

def _get_workbook(workbook_id: str) -> Sheets:
    if workbook_id not in _active_workbooks:
        raise HTTPException(404, "Workbook not found")
    return _active_workbooks[workbook_id]


def _get_table(sheets: Sheets, sheet: str) -> Table:
    """Resolve a sheet by name, or by position if the segment is numeric."""
    try:
        if sheet not in sheets and sheet.isdigit():
            return sheets.get(int(sheet))
        return sheets.get(sheet)
    except (ValueNotFoundError, SheetIndexError) as e:
        raise _not_found(e)


def _not_found(error: Exception) -> HTTPException:
    if isinstance(error, ValueNotFoundError):
        return HTTPException(404, {"kind": error.kind.value, "key": error.key, "message": str(error)})
    return HTTPException(404, {"kind": "IndexOutOfRange", "message": str(error)})


def _unwritable(error: WorkbookWriteError) -> HTTPException:
    return HTTPException(422, {
        "kind": "Unwritable",
        "sheet": error.sheet,
        "row": error.row,
        "column": error.column,
        "message": str(error),
    })


def _xml_response(sheets: Sheets, filename: str) -> Response:
    try:
        content = workbook_to_xml(sheets)
    except WorkbookWriteError as e:
        logger.info(f"[API] Export failed: {e}")
        raise _unwritable(e)

    return Response(
        content=content,
        media_type=XML_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("/", response_model=WorkbookJSON)
async def upload_workbook(request: Request):
    """Upload workbook XML (raw request body) and parse it."""
    body = await request.body()
    if not body:
        raise HTTPException(400, "Empty request body")

    try:
        sheets = parse_workbook_xml(body)
    except WorkbookParseError as e:
        logger.info(f"[API] Rejected workbook upload: {e}")
        raise HTTPException(400, f"Failed to parse workbook: {e}")

    workbook_id = uuid.uuid4().hex[:8]
    _active_workbooks[workbook_id] = sheets
    logger.info(f"[API] Stored workbook {workbook_id} with {len(sheets)} sheets")

    return sheets_to_json(sheets, workbook_id)


@router.post("/render")
async def render_workbook(workbook: WorkbookJSON):
    """Convert a JSON workbook straight to XML without storing it."""
    return _xml_response(sheets_from_json(workbook), "workbook.xml")


@router.get("/{workbook_id}", response_model=WorkbookJSON)
async def get_workbook(workbook_id: str):
    """Get the current state of a workbook."""
    return sheets_to_json(_get_workbook(workbook_id), workbook_id)


@router.get("/{workbook_id}/sheets/{sheet}")
async def get_sheet(workbook_id: str, sheet: str):
    """Get one sheet by name or position."""
    sheets = _get_workbook(workbook_id)
    table = _get_table(sheets, sheet)
    name = next(n for n, t in sheets.items() if t is table)
    return table_to_json(name, table)


@router.get("/{workbook_id}/sheets/{sheet}/cell", response_model=CellValueJSON)
async def get_cell(workbook_id: str, sheet: str, row: str, column: str):
    """Get a single cell value by row and column title."""
    table = _get_table(_get_workbook(workbook_id), sheet)
    try:
        value = table.get_value(row, column)
        is_set = table.is_set(row, column)
    except ValueNotFoundError as e:
        raise _not_found(e)

    return CellValueJSON(sheet=sheet, row=row, column=column, value=value, is_set=is_set)


@router.put("/{workbook_id}/sheets/{sheet}/cell", response_model=CellValueJSON)
async def set_cell(workbook_id: str, sheet: str, edit: CellEditRequest):
    """Set a cell value, creating the row and column if needed.

    Text that could not be exported as XML is rejected before it is stored.
    """
    table = _get_table(_get_workbook(workbook_id), sheet)

    try:
        for text in (edit.row, edit.column, edit.value):
            if text is not None:
                check_cell_text(text, sheet, edit.row, edit.column)
    except WorkbookWriteError as e:
        raise _unwritable(e)

    if edit.value is None:
        table.add_row(edit.row)
        table.add_column(edit.column)
        table.clear_value(edit.row, edit.column)
    else:
        table.set_value(edit.row, edit.column, edit.value)

    return CellValueJSON(
        sheet=sheet,
        row=edit.row,
        column=edit.column,
        value=table.get_value(edit.row, edit.column),
        is_set=table.is_set(edit.row, edit.column),
    )


@router.delete("/{workbook_id}/sheets/{sheet}/rows/{row}")
async def delete_row(workbook_id: str, sheet: str, row: str):
    """Remove a row and all of its cells."""
    table = _get_table(_get_workbook(workbook_id), sheet)
    table.remove_row(row)
    return {"status": "ok", "row_titles": list(table.row_titles)}


@router.delete("/{workbook_id}/sheets/{sheet}/columns/{column}")
async def delete_column(workbook_id: str, sheet: str, column: str):
    """Remove a column and all of its cells."""
    table = _get_table(_get_workbook(workbook_id), sheet)
    table.remove_column(column)
    return {"status": "ok", "column_titles": list(table.column_titles)}


@router.get("/{workbook_id}/export")
async def export_workbook(workbook_id: str):
    """Export the workbook back to XML."""
    sheets = _get_workbook(workbook_id)
    logger.info(f"[API] Exporting workbook {workbook_id}")
    return _xml_response(sheets, f"{workbook_id}.xml")
