from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from .timeline import DateRange, Granularity, HeaderBucket, RowSpan


FieldKind = Literal["text", "date", "datetime", "color"]
"""Column types accepted in table files: text, date, datetime (date with time of day), color."""


@dataclass(frozen=True)
class DateField:
    """Calendar date column; with_time marks values that also carry a time of day."""

    with_time: bool = False


@dataclass(frozen=True)
class ColorField:
    """Color column; rows holding the default value are drawn without a color."""

    default: str = "#ffffff"


@dataclass(frozen=True)
class TextField:
    """Any other column; usable as label or title."""


FieldType = DateField | ColorField | TextField
"""Convenience alias for the column type variants."""


@dataclass(frozen=True)
class Column:
    name: str
    field: FieldType

    @property
    def kind(self) -> FieldKind:
        if isinstance(self.field, DateField):
            return "datetime" if self.field.with_time else "date"
        if isinstance(self.field, ColorField):
            return "color"
        return "text"


@dataclass
class Record:
    """One result row; values are keyed by column name and may be None."""

    values: dict[str, Any] = field(default_factory=dict)
    pid: str | None = None

    def get(self, name: str) -> Any:
        return self.values.get(name)


@dataclass
class Table:
    """Typed columns plus the ordered records to draw."""

    columns: list[Column] = field(default_factory=list)
    records: list[Record] = field(default_factory=list)
    title: str | None = None

    def column(self, name: str) -> Column:
        for column in self.columns:
            if column.name == name:
                return column
        raise KeyError(name)


@dataclass(frozen=True)
class ColumnRefs:
    """Names of the columns that play each role in the chart."""

    start: str
    end: str
    label: str
    title: str
    color: str | None = None


@dataclass
class GanttRow:
    """
    Flattened view of a record used by renderers.

    Only the fields relevant to drawing are kept: the row position, label and title values,
    the color (None when default or absent), the three day spans, and every
    (column, value) pair for the detail flyout.
    """

    order: int
    label: Any
    title: Any
    span: RowSpan
    label_column: Column | None = None
    title_column: Column | None = None
    color: str | None = None
    cells: list[tuple[Column, Any]] = field(default_factory=list)


@dataclass
class GanttChart:
    """Everything a renderer needs: the shared range, its header buckets and one row per record."""

    date_range: DateRange
    granularity: Granularity
    headers: list[HeaderBucket]
    rows: list[GanttRow]
    title: str | None = None

    @property
    def days(self) -> int:
        return self.date_range.days
