"""Table encoder for ``type: table`` query targets."""

from collections.abc import Callable, Sequence
from typing import Any

from grafanasj.core.encoding.wiretime import encode_range_time
from grafanasj.core.errors import ColumnLengthMismatch, InvalidColumnType
from grafanasj.core.models import (
    NumberColumn,
    StringColumn,
    TableColumn,
    TimeColumn,
)


def _passthrough(value: Any) -> Any:
    return value


def _cell_encoder(column: TableColumn) -> tuple[str, Callable[[Any], Any]]:
    """Return the wire type tag and cell encoder for a column's variant.

    Table time cells use the RFC 3339 string form, not epoch milliseconds.

    Raises:
        InvalidColumnType: If the column data is not a known variant.
    """
    match column.data:
        case NumberColumn():
            return NumberColumn.type_tag, _passthrough
        case StringColumn():
            return StringColumn.type_tag, _passthrough
        case TimeColumn():
            return TimeColumn.type_tag, encode_range_time
        case other:
            raise InvalidColumnType(
                f"invalid column type {type(other).__name__} "
                f"for column {column.text!r}"
            )


def encode_table(columns: Sequence[TableColumn]) -> dict[str, Any]:
    """Encode table columns into the SimpleJSON table response shape.

    Args:
        columns: Columns in display order.

    Returns:
        ``{"type": "table", "columns": [...], "rows": [...]}`` where each
        row holds one cell per column.

    Raises:
        InvalidColumnType: If any column is not a known variant.
        ColumnLengthMismatch: If columns differ in length. Nothing is
            encoded in that case.
    """
    headers: list[dict[str, str]] = []
    encoded_columns: list[list[Any]] = []
    row_count: int | None = None

    for column in columns:
        if not isinstance(column, TableColumn):
            raise InvalidColumnType(
                f"expected TableColumn, got {type(column).__name__}"
            )
        type_tag, encode_cell = _cell_encoder(column)
        values = list(column.data.values)
        if row_count is None:
            row_count = len(values)
        elif len(values) != row_count:
            raise ColumnLengthMismatch(
                f"all columns must be of equal length: column {column.text!r} "
                f"has {len(values)} values, expected {row_count}"
            )
        headers.append({"text": column.text, "type": type_tag})
        encoded_columns.append([encode_cell(value) for value in values])

    rows = [list(row) for row in zip(*encoded_columns)]
    return {"type": "table", "columns": headers, "rows": rows}
