from __future__ import annotations

from typing import Any, Iterable

from .table_models import ColorField, Column, ColumnRefs, DateField


class MissingColumnError(Exception):
    """Raised when the selected columns cannot fill the start, end and label roles."""


def classify_columns(columns: Iterable[Column]) -> ColumnRefs:
    """
    Figure out which columns will be used for dates, color, label and title.

    - The first date column is the start, the second is the end; any further
      date columns are ignored.
    - The last color column wins.
    - The first other column is the label, the second the title; without a
      title column the label doubles as title.
    """

    start: str | None = None
    end: str | None = None
    color: str | None = None
    label: str | None = None
    title: str | None = None

    for column in columns:
        if isinstance(column.field, DateField):
            if start is None:
                start = column.name
            elif end is None:
                end = column.name
        elif isinstance(column.field, ColorField):
            color = column.name
        elif label is None:
            label = column.name
        elif title is None:
            title = column.name

    if start is None or end is None:
        raise MissingColumnError("Not enough Date columns selected")
    if label is None:
        raise MissingColumnError("No label column found")

    return ColumnRefs(start=start, end=end, label=label, title=title or label, color=color)


def row_color(column: Column | None, value: Any) -> str | None:
    """Color to draw a row with, or None when absent or left at the column default."""
    if column is None or not isinstance(column.field, ColorField):
        return None
    if not value or value == column.field.default:
        return None
    return str(value)

