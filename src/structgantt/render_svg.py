from __future__ import annotations

from importlib import metadata
from pathlib import Path

import matplotlib

matplotlib.use("Agg")  # ensure headless, deterministic output
import matplotlib.pyplot as plt
from matplotlib.ticker import FixedLocator, NullFormatter

from .table_models import GanttChart

FONT_SCALE = 1.0
TITLE_FONT = 14 * FONT_SCALE
LABEL_FONT = 10 * FONT_SCALE
FOOTER_FONT = 8 * FONT_SCALE
TICK_FONT = 9 * FONT_SCALE
TOP_MARGIN_FRAC = 0.85
TITLE_Y = 0.985
ROW_HEIGHT = 0.6
DEFAULT_BAR_COLOR = "#8fb0dd"


def render_svg(chart: GanttChart, out_path: str) -> None:
    """
    Render a static SVG Gantt chart to `out_path`.

    - x axis is measured in day columns, 0 at the range start.
    - Header buckets are labelled along the top and separated by dashed lines.
    - Rows without both dates keep their label but draw no bar.
    """

    rows = chart.rows
    days = chart.days

    fig_height = max(3.0, ROW_HEIGHT * len(rows) + 2.0)
    fig_width = max(12.0, min(24.0, days / 7.0 * 2.0 + 6.0))
    fig = plt.figure(figsize=(fig_width, fig_height))
    # Allocate explicit grid: left column for labels, right for chart.
    gs = fig.add_gridspec(1, 2, width_ratios=[1.2, 4.0], wspace=0.05, left=0.06, right=0.98, top=TOP_MARGIN_FRAC, bottom=0.1)
    label_ax = fig.add_subplot(gs[0, 0])
    ax = fig.add_subplot(gs[0, 1], sharey=label_ax)

    # Configure axes: day columns on x, rows on y.
    ax.set_ylim(-1, max(len(rows), 1))
    ax.invert_yaxis()
    ax.set_xlim(0, days)
    ax.xaxis.tick_top()
    boundaries, centers = _bucket_positions(chart)
    ax.xaxis.set_major_locator(FixedLocator(boundaries))
    ax.xaxis.set_major_formatter(NullFormatter())
    ax.xaxis.set_minor_locator(FixedLocator(centers))
    ax.set_xticklabels([bucket.label for bucket in chart.headers], minor=True)
    ax.tick_params(axis="x", which="minor", length=0, labelsize=TICK_FONT, pad=4)
    ax.grid(True, axis="x", which="major", linestyle="--", alpha=0.4)
    ax.set_yticks([])

    # Label axis on the left; pure text, shares y-scale.
    label_ax.set_xlim(0, 1)
    label_ax.axis("off")

    if chart.title:
        fig.suptitle(chart.title, x=0.5, fontsize=TITLE_FONT, y=TITLE_Y)
    footer = (
        f"{chart.date_range.start.isoformat()} to {chart.date_range.end.isoformat()}"
        f" by {chart.granularity.value} · structgantt v{_tool_version()}"
    )
    fig.text(0.99, 0.01, footer, ha="right", va="bottom", fontsize=FOOTER_FONT, alpha=0.8)

    for row in rows:
        y = row.order
        label_ax.text(
            0.98,
            y,
            "" if row.label is None else str(row.label),
            ha="right",
            va="center",
            fontsize=LABEL_FONT,
            transform=label_ax.transData,
        )

        if not row.span.during:
            continue
        ax.barh(
            y,
            width=row.span.during,
            left=row.span.pre,
            height=ROW_HEIGHT,
            color=row.color or DEFAULT_BAR_COLOR,
            edgecolor="black",
            linewidth=0.5,
        )
        if row.title is not None and row.title != row.label:
            ax.text(
                row.span.pre + 0.2,
                y,
                str(row.title),
                ha="left",
                va="center",
                fontsize=LABEL_FONT * 0.8,
                clip_on=True,
            )

    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(out_path, format="svg", bbox_inches="tight")
    plt.close(fig)


def _bucket_positions(chart: GanttChart) -> tuple[list[float], list[float]]:
    """Return bucket boundaries and bucket centers in day columns."""
    boundaries: list[float] = [0.0]
    centers: list[float] = []
    for bucket in chart.headers:
        centers.append(boundaries[-1] + bucket.span / 2)
        boundaries.append(boundaries[-1] + bucket.span)
    return boundaries, centers


def _tool_version() -> str:
    try:
        return metadata.version("structgantt")
    except metadata.PackageNotFoundError:
        return "0.0.0"
