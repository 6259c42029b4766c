"""Tests for Table: title bookkeeping, cell access and error kinds."""

import sys
from pathlib import Path

# Add project root to path (tests/workbook/ -> tests/ -> project root)
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import pytest

from services.workbook_engine import LookupKind, Table, ValueNotFoundError


def make_table() -> Table:
    table = Table()
    table.set_value("a", "x", "1")
    table.set_value("b", "y", "2")
    return table


class TestTitles:
    """Row/column titles keep insertion order and stay unique."""

    def test_insertion_order(self):
        table = Table()
        for title in ["zeta", "alpha", "mid"]:
            table.add_row(title)
        table.add_column("2")
        table.add_column("1")

        assert table.row_titles == ("zeta", "alpha", "mid")
        assert table.column_titles == ("2", "1")

    def test_add_is_idempotent(self):
        table = make_table()
        table.add_row("a")
        table.add_row("a")
        table.add_column("x")

        assert table.row_titles == ("a", "b")
        assert table.column_titles == ("x", "y")
        assert table.get_value("a", "x") == "1"

    def test_set_value_creates_titles(self):
        table = Table()
        table.set_value("row", "col", "v")

        assert table.row_titles == ("row",)
        assert table.column_titles == ("col",)

    def test_titles_are_snapshots(self):
        table = make_table()
        titles = table.row_titles
        table.add_row("c")

        assert titles == ("a", "b")
        assert table.row_titles == ("a", "b", "c")


class TestBackfill:
    """Every declared row has a readable value for every declared column."""

    def test_new_column_reads_default(self):
        table = Table()
        table.add_row("a")
        table.add_row("b")
        table.add_column("X")

        assert table.get_value("a", "X") is None
        assert table.get_value("b", "X") is None

    def test_new_row_reads_default(self):
        table = make_table()
        table.add_row("c")

        assert table.get_value("c", "x") is None
        assert table.get_value("c", "y") is None
        # column "y" was added after row "a"
        assert table.get_value("a", "y") is None

    def test_per_table_default(self):
        table = Table(default="")
        table.add_row("a")
        table.add_column("x")

        assert table.get_value("a", "x") == ""
        assert not table.is_set("a", "x")

    def test_is_set_distinguishes_stored_default(self):
        table = Table()
        table.add_row("a")
        table.add_column("x")
        assert not table.is_set("a", "x")

        table.set_value("a", "x", None)
        assert table.is_set("a", "x")
        assert table.get_value("a", "x") is None

        table.clear_value("a", "x")
        assert not table.is_set("a", "x")


class TestLookupErrors:
    """Lookup failures carry the kind of address part that was missing."""

    def test_missing_row(self):
        table = make_table()
        with pytest.raises(ValueNotFoundError) as exc:
            table.get_value("missingRow", "anyCol")
        assert exc.value.kind is LookupKind.NO_ROW
        assert exc.value.key == "missingRow"

    def test_missing_column(self):
        table = make_table()
        with pytest.raises(ValueNotFoundError) as exc:
            table.get_value("a", "missingCol")
        assert exc.value.kind is LookupKind.NO_COLUMN

    def test_missing_row_wins_over_missing_column(self):
        table = make_table()
        with pytest.raises(ValueNotFoundError) as exc:
            table.get_value("nope", "nope")
        assert exc.value.kind is LookupKind.NO_ROW

    def test_is_a_lookup_error(self):
        with pytest.raises(LookupError):
            Table().get_value("a", "b")

    def test_message_names_the_kind(self):
        with pytest.raises(ValueNotFoundError, match="NoRow"):
            Table().get_value("a", "b")


class TestRemoval:
    """Removing titles drops their cells and keeps the remaining order."""

    def test_remove_row(self):
        table = Table()
        for title in ["a", "b", "c"]:
            table.set_value(title, "x", title.upper())
        table.remove_row("b")

        assert table.row_titles == ("a", "c")
        assert table.get_value("c", "x") == "C"
        with pytest.raises(ValueNotFoundError):
            table.get_value("b", "x")

    def test_remove_column(self):
        table = make_table()
        table.add_column("z")
        table.remove_column("x")

        assert table.column_titles == ("y", "z")
        with pytest.raises(ValueNotFoundError) as exc:
            table.get_value("a", "x")
        assert exc.value.kind is LookupKind.NO_COLUMN

    def test_remove_missing_is_noop(self):
        table = make_table()
        table.remove_row("nope")
        table.remove_column("nope")

        assert table.row_titles == ("a", "b")
        assert table.column_titles == ("x", "y")

    def test_readd_after_remove_is_empty(self):
        table = make_table()
        table.remove_column("x")
        table.add_column("x")

        assert table.get_value("a", "x") is None
        assert not table.is_set("a", "x")


class TestRendering:
    """Text grid and list views."""

    def test_str_grid(self):
        table = make_table()

        assert str(table) == "\tx\ty\na\t1\t \nb\t \t2"

    def test_str_empty(self):
        assert str(Table()) == ""

    def test_to_rows(self):
        table = make_table()

        assert table.to_rows() == [
            [None, "x", "y"],
            ["a", "1", None],
            ["b", None, "2"],
        ]

    def test_to_rows_ignores_default(self):
        table = Table(default="")
        table.set_value("a", "x", "1")
        table.add_column("y")

        assert table.to_rows() == [[None, "x", "y"], ["a", "1", None]]

    def test_len_counts_rows(self):
        assert len(make_table()) == 2
