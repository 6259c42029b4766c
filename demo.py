#!/usr/bin/env python3
"""
Workbook Preview

Parses an XML Spreadsheet file and prints every sheet as a table.
Run with: python demo.py path/to/workbook.xml [--export out.xml]
"""

import argparse
import sys
from pathlib import Path

from rich.box import ROUNDED
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from services.workbook_engine import (
    Sheets,
    WorkbookParseError,
    parse_workbook_file,
    write_workbook_file,
)


console = Console()


# ─────────────────────────────────────────────────────────────────────────────
# Rendering
# ─────────────────────────────────────────────────────────────────────────────

def build_sheet_table(name: str, sheets: Sheets) -> Table:
    """Build a rich table for one sheet. Unset cells are shown dimmed."""
    header, *body = sheets.get(name).to_rows()
    table = Table(title=name, box=ROUNDED, border_style="blue")
    table.add_column("", style="cyan")
    for column in header[1:]:
        table.add_column(column, style="white")

    for title, *values in body:
        table.add_row(title, *("[dim]-[/dim]" if v is None else str(v) for v in values))

    return table


def show_workbook(path: Path, sheets: Sheets) -> None:
    console.print(Panel(
        f"[bold]{path.name}[/bold]\n{len(sheets)} sheet(s): {', '.join(sheets.names) or '-'}",
        border_style="green",
    ))
    for name in sheets:
        console.print(build_sheet_table(name, sheets))
        console.print()


# ─────────────────────────────────────────────────────────────────────────────
# Main
# ─────────────────────────────────────────────────────────────────────────────

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Preview an XML Spreadsheet workbook")
    parser.add_argument("path", type=Path, help="Workbook XML file")
    parser.add_argument("--export", type=Path, help="Write the re-serialized workbook here")
    args = parser.parse_args(argv)

    if not args.path.exists():
        console.print(f"[red]✗ File not found: {args.path}[/red]")
        return 1

    try:
        sheets = parse_workbook_file(args.path)
    except WorkbookParseError as e:
        console.print(f"[red]✗ Could not parse {args.path}: {e}[/red]")
        return 1

    show_workbook(args.path, sheets)

    if args.export:
        out = write_workbook_file(sheets, args.export)
        console.print(f"[green]✓ Wrote {out}[/green]")

    return 0


if __name__ == "__main__":
    sys.exit(main())
