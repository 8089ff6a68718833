from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Any

from jinja2 import DictLoader, Environment, select_autoescape

from .table_models import Column, GanttChart

# Share of the table width given to the label column, in percent.
HEAD_WIDTH = 15

# ------------------------------
# Templates (inline via DictLoader)
# ------------------------------
TABLE = """\
{%- macro cell(column, value) -%}
{%- if value is none -%}
{%- elif column and column.kind == "color" -%}
<span class="swatch" style="background-color:{{ value }}"></span>{{ value }}
{%- else -%}
{{ value|cell_text(column) }}
{%- endif -%}
{%- endmacro -%}
<table class="structgantt">
<colgroup>
<col style="width:{{ head_width }}%"/>
{% for _ in range(chart.days) %}
<col style="width:{{ day_width }}%"/>
{% endfor %}
</colgroup>
<thead>
<tr>
<th></th>
{% for bucket in chart.headers %}
<th colspan="{{ bucket.span }}">{{ bucket.label }}</th>
{% endfor %}
</tr>
</thead>
<tbody>
{% for row in chart.rows %}
<tr>
<th>{{ cell(row.label_column, row.label) }}</th>
{# period before the task #}
{% for _ in range(row.span.pre) %}
<td></td>
{% endfor %}
{% if row.span.during %}
<td colspan="{{ row.span.during }}" class="task"{% if row.color %} style="background-color:{{ row.color }}"{% endif %}>
{{ cell(row.title_column, row.title) }}
<dl class="flyout">
{% for column, value in row.cells %}
<dt>{{ column.name }}</dt><dd>{{ cell(column, value) }}</dd>
{% endfor %}
</dl>
</td>
{% endif %}
{# period after the task #}
{% for _ in range(row.span.after) %}
<td></td>
{% endfor %}
</tr>
{% endfor %}
</tbody>
</table>
"""

PAGE = """\
<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8"/>
<title>{{ chart.title or "Gantt chart" }}</title>
<style>
table.structgantt { border-collapse: collapse; width: 100%; table-layout: fixed; }
table.structgantt th, table.structgantt td { border: 1px solid #ddd; padding: 0; font-size: 80%; }
table.structgantt tbody th { text-align: left; padding: 0 4px; font-weight: normal; }
table.structgantt td.task { background-color: #8fb0dd; position: relative; overflow: visible; white-space: nowrap; }
table.structgantt dl.flyout { display: none; position: absolute; z-index: 10; background: #fff;
  border: 1px solid #999; padding: 4px; margin: 0; }
table.structgantt td.task:hover dl.flyout { display: block; }
table.structgantt span.swatch { display: inline-block; width: 1em; height: 1em; margin-right: 2px; }
</style>
</head>
<body>
{% if chart.title %}
<h1>{{ chart.title }}</h1>
{% endif %}
{% include "table.html" %}
</body>
</html>
"""


def _cell_text(value: Any, column: Column | None) -> str:
    """Plain text of a cell value; dates print as ISO, datetimes down to the minute."""
    if column is not None and column.kind == "datetime" and isinstance(value, dt.datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    if isinstance(value, dt.datetime):
        return value.date().isoformat()
    if isinstance(value, dt.date):
        return value.isoformat()
    return str(value)


def _build_env() -> Environment:
    env = Environment(
        loader=DictLoader({"table.html": TABLE, "page.html": PAGE}),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["cell_text"] = _cell_text
    return env


_ENV = _build_env()


def _context(chart: GanttChart) -> dict[str, Any]:
    # set the width of each day
    day_width = (100 - HEAD_WIDTH) / chart.days
    return {"chart": chart, "head_width": HEAD_WIDTH, "day_width": f"{day_width:.4g}"}


def render_html(chart: GanttChart, out: list[str] | None = None) -> str:
    """
    Render the chart as an HTML table and return it.

    The table is appended to `out` when given, so callers can collect several
    tables into one buffer they own.
    """

    html = _ENV.get_template("table.html").render(_context(chart))
    if out is not None:
        out.append(html)
    return html


def write_html(chart: GanttChart, out_path: str) -> None:
    """Write the chart as a standalone HTML page to `out_path`."""

    page = _ENV.get_template("page.html").render(_context(chart))
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    Path(out_path).write_text(page, encoding="utf-8")
