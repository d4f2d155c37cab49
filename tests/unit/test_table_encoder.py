"""Tests for the table column encoder."""

from datetime import UTC, datetime

import pytest

from grafanasj.core.encoding.table import encode_table
from grafanasj.core.errors import ColumnLengthMismatch, InvalidColumnType
from grafanasj.core.models import (
    NumberColumn,
    StringColumn,
    TableColumn,
    TimeColumn,
)

pytestmark = [pytest.mark.encoding, pytest.mark.tier(1)]

T0 = datetime(2016, 10, 31, 6, 33, 44, 866000, tzinfo=UTC)


class TestEncodeTable:
    """Tests for encode_table."""

    def test_headers_follow_column_variants(self) -> None:
        """Each column header carries its label and variant type tag."""
        result = encode_table(
            [
                TableColumn("Time", TimeColumn([T0])),
                TableColumn("Path", StringColumn(["/index"])),
                TableColumn("Count", NumberColumn([42.0])),
            ]
        )

        assert result["type"] == "table"
        assert result["columns"] == [
            {"text": "Time", "type": "time"},
            {"text": "Path", "type": "string"},
            {"text": "Count", "type": "number"},
        ]

    def test_rows_are_transposed_columns(self) -> None:
        """Row i holds the i-th value of every column, in column order."""
        result = encode_table(
            [
                TableColumn("Name", StringColumn(["a", "b", "c"])),
                TableColumn("Value", NumberColumn([1.0, 2.5, 3])),
                TableColumn("Other", StringColumn(["x", "y", "z"])),
            ]
        )

        assert result["rows"] == [["a", 1.0, "x"], ["b", 2.5, "y"], ["c", 3, "z"]]

    def test_time_cells_use_rfc3339_strings(self) -> None:
        """Table time cells use the string form, not epoch milliseconds."""
        result = encode_table([TableColumn("Time", TimeColumn([T0]))])

        assert result["rows"] == [["2016-10-31T06:33:44.866Z"]]

    def test_length_mismatch_fails(self) -> None:
        """Columns of lengths 3, 3, 2 are rejected rather than truncated."""
        columns = [
            TableColumn("A", NumberColumn([1, 2, 3])),
            TableColumn("B", NumberColumn([1, 2, 3])),
            TableColumn("C", NumberColumn([1, 2])),
        ]

        with pytest.raises(ColumnLengthMismatch, match="equal length"):
            encode_table(columns)

    def test_row_count_comes_from_first_column(self) -> None:
        """An empty first column does not let later columns set the count."""
        columns = [
            TableColumn("A", StringColumn([])),
            TableColumn("B", StringColumn(["x"])),
        ]

        with pytest.raises(ColumnLengthMismatch):
            encode_table(columns)

    def test_unknown_column_variant_fails(self) -> None:
        """Data that is not a known column variant is an explicit error."""
        columns = [
            TableColumn("A", NumberColumn([1])),
            TableColumn("B", [1]),  # type: ignore[arg-type]
        ]

        with pytest.raises(InvalidColumnType, match="'B'"):
            encode_table(columns)

    def test_non_column_entry_fails(self) -> None:
        """Entries that are not TableColumn objects are rejected."""
        with pytest.raises(InvalidColumnType):
            encode_table([{"text": "A", "data": [1]}])  # type: ignore[list-item]

    def test_empty_table(self) -> None:
        """No columns gives an empty table."""
        assert encode_table([]) == {"type": "table", "columns": [], "rows": []}

    def test_equal_length_empty_columns(self) -> None:
        """Columns that are all empty give headers and no rows."""
        result = encode_table(
            [
                TableColumn("A", NumberColumn([])),
                TableColumn("B", StringColumn([])),
            ]
        )

        assert len(result["columns"]) == 2
        assert result["rows"] == []
