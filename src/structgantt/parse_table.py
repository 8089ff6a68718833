from __future__ import annotations

import datetime as _dt
import re
from dataclasses import dataclass
from typing import Any

import yaml

from .table_models import ColorField, Column, DateField, Record, Table, TextField

_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class TableValidationError(Exception):
    """Raised when a table file is malformed (bad types, unknown columns, bad values)."""


@dataclass(frozen=True)
class _Where:
    """Location inside the table document, printed like rows[2].values.Start."""

    trail: str = ""

    def key(self, name: str) -> "_Where":
        return _Where(f"{self.trail}.{name}" if self.trail else name)

    def index(self, idx: int) -> "_Where":
        return _Where(f"{self.trail}[{idx}]")

    def __str__(self) -> str:
        return self.trail or "root"


def load_table(path: str) -> Table:
    """Load a Table (columns and records) from a YAML file at the given path."""

    with open(path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    return parse_table(raw)


def parse_table(data: Any) -> Table:
    """Build a Table from already-loaded YAML data."""
    return _parse_table(data, _Where())


def _parse_table(data: Any, path: _Where) -> Table:
    if not isinstance(data, dict):
        raise TableValidationError(f"{path}: expected mapping at top level")
    _assert_allowed_keys(data, {"table", "columns", "rows"}, path)

    title = None
    table_raw = data.get("table")
    if table_raw is not None:
        if not isinstance(table_raw, dict):
            raise TableValidationError(f"{path.key('table')}: expected mapping")
        _assert_allowed_keys(table_raw, {"title"}, path.key("table"))
        if "title" in table_raw:
            title = _require_str(table_raw, "title", path.key("table"))

    columns_raw = data.get("columns")
    if columns_raw is None:
        raise TableValidationError(f"{path}: missing required field 'columns'")
    if not isinstance(columns_raw, list):
        raise TableValidationError(f"{path.key('columns')}: expected list")

    names: set[str] = set()
    columns: list[Column] = []
    for idx, column_raw in enumerate(columns_raw):
        columns.append(_parse_column(column_raw, path.key("columns").index(idx), names))

    rows_raw = data.get("rows")
    if rows_raw is None:
        rows_raw = []
    if not isinstance(rows_raw, list):
        raise TableValidationError(f"{path.key('rows')}: expected list")

    lookup = {column.name: column for column in columns}
    records = [_parse_record(row_raw, path.key("rows").index(idx), lookup) for idx, row_raw in enumerate(rows_raw)]

    return Table(columns=columns, records=records, title=title)


def _parse_column(data: Any, path: _Where, names: set[str]) -> Column:
    if not isinstance(data, dict):
        raise TableValidationError(f"{path}: expected mapping for column")

    _assert_allowed_keys(data, {"name", "type", "default"}, path)
    name = _require_str(data, "name", path)
    if name in names:
        raise TableValidationError(f"{path.key('name')}: duplicate column '{name}'")
    names.add(name)

    kind = _require_str(data, "type", path)
    if "default" in data and kind != "color":
        raise TableValidationError(f"{path}: only color columns accept a default")

    if kind == "text":
        return Column(name=name, field=TextField())
    if kind == "date":
        return Column(name=name, field=DateField(with_time=False))
    if kind == "datetime":
        return Column(name=name, field=DateField(with_time=True))
    if kind == "color":
        default = data.get("default", ColorField().default)
        return Column(name=name, field=ColorField(default=_parse_color(default, path.key("default"))))

    raise TableValidationError(f"{path.key('type')}: unknown column type '{kind}'")


def _parse_record(data: Any, path: _Where, columns: dict[str, Column]) -> Record:
    if not isinstance(data, dict):
        raise TableValidationError(f"{path}: expected mapping for row")
    _assert_allowed_keys(data, {"pid", "values"}, path)

    pid = None
    if "pid" in data:
        pid = _require_str(data, "pid", path)

    values_raw = data.get("values")
    if values_raw is None:
        values_raw = {}
    if not isinstance(values_raw, dict):
        raise TableValidationError(f"{path.key('values')}: expected mapping of column name to value")
    _assert_allowed_keys(values_raw, set(columns), path.key("values"))

    values: dict[str, Any] = {}
    for name, column in columns.items():
        values[name] = _parse_value(values_raw.get(name), column, path.key("values").key(name))
    return Record(values=values, pid=pid)


def _parse_value(value: Any, column: Column, path: _Where) -> Any:
    if value is None or value == "":
        return None
    if isinstance(column.field, DateField):
        return _parse_date(value, column.field.with_time, path)
    if isinstance(column.field, ColorField):
        return _parse_color(value, path)
    if isinstance(value, (dict, list)):
        raise TableValidationError(f"{path}: expected scalar value")
    return value


def _parse_date(value: Any, with_time: bool, path: _Where) -> _dt.date:
    if isinstance(value, _dt.datetime):
        return value if with_time else value.date()
    if isinstance(value, _dt.date):
        return value
    if not isinstance(value, str):
        raise TableValidationError(f"{path}: expected YYYY-MM-DD string")
    try:
        if with_time:
            return _dt.datetime.fromisoformat(value)
        return _dt.date.fromisoformat(value.strip()[:10])
    except ValueError as exc:
        expected = "YYYY-MM-DD[ HH:MM]" if with_time else "YYYY-MM-DD"
        raise TableValidationError(f"{path}: expected {expected} string") from exc


def _parse_color(value: Any, path: _Where) -> str:
    if not isinstance(value, str) or not _COLOR_RE.match(value):
        raise TableValidationError(f"{path}: expected color like #rrggbb")
    return value.lower()


def _assert_allowed_keys(data: dict[str, Any], allowed: set[str], path: _Where) -> None:
    extras = sorted(str(key) for key in set(data.keys()) - allowed)
    if extras:
        raise TableValidationError(f"{path}: unexpected fields {extras}")


def _require_str(data: dict[str, Any], key: str, path: _Where) -> str:
    if key not in data:
        raise TableValidationError(f"{path}: missing required field '{key}'")
    value = data[key]
    if not isinstance(value, str) or not value.strip():
        raise TableValidationError(f"{path.key(key)}: expected non-empty string")
    return value
