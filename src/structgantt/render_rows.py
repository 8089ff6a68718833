from __future__ import annotations

import logging
from typing import List

from .columns import classify_columns, row_color
from .table_models import ColumnRefs, GanttChart, GanttRow, Table
from .timeline import DateRange, build_headers, choose_granularity, compute_range, compute_row_span

logger = logging.getLogger(__name__)


def build_chart(table: Table, skip_weekends: bool = False) -> GanttChart:
    """
    Classify the columns, compute the shared range and lay out every row.

    Raises MissingColumnError or InsufficientDataError; nothing is drawn in
    either case.
    """

    refs = classify_columns(table.columns)
    date_range = compute_range(table.records, refs.start, refs.end, skip_weekends=skip_weekends)
    granularity = choose_granularity(date_range)
    headers = build_headers(date_range, granularity)
    logger.debug(
        "Range %s..%s (%d days) drawn by %s in %d header cells",
        date_range.start,
        date_range.end,
        date_range.days,
        granularity.value,
        len(headers),
    )
    return GanttChart(
        date_range=date_range,
        granularity=granularity,
        headers=headers,
        rows=to_gantt_rows(table, refs, date_range),
        title=table.title,
    )


def to_gantt_rows(table: Table, refs: ColumnRefs, date_range: DateRange) -> list[GanttRow]:
    """
    Convert the table records into a flat list of render rows, in input order.

    Each row carries its three day spans against the shared range. Rows whose
    end precedes their start do not line up with the header and are logged.
    """

    color_column = table.column(refs.color) if refs.color else None
    label_column = table.column(refs.label)
    title_column = table.column(refs.title)
    days = date_range.days
    rows: List[GanttRow] = []

    for order, record in enumerate(table.records):
        span = compute_row_span(date_range, record.get(refs.start), record.get(refs.end))
        if span.total != days:
            logger.warning(
                "Row %d (%s) spans %d days instead of %d; is its end before its start?",
                order,
                record.pid or record.get(refs.label),
                span.total,
                days,
            )

        rows.append(
            GanttRow(
                order=order,
                label=record.get(refs.label),
                title=record.get(refs.title),
                span=span,
                label_column=label_column,
                title_column=title_column,
                color=row_color(color_column, record.get(refs.color)) if refs.color else None,
                cells=[(column, record.get(column.name)) for column in table.columns],
            )
        )

    logger.debug("Prepared %d rows over %d days", len(rows), days)
    return rows
