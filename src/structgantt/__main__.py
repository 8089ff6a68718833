from __future__ import annotations

import argparse
import logging
import sys
import webbrowser
from pathlib import Path

import yaml

from .columns import MissingColumnError
from .parse_table import TableValidationError, load_table
from .render_html import write_html
from .render_rows import build_chart
from .render_svg import render_svg
from .table_models import GanttChart, Table
from .timeline import InsufficientDataError

logger = logging.getLogger("structgantt")

FORMATS = ("html", "svg")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="structgantt",
        description="Date-scaled Gantt timeline from a table of records",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("table", help="Path to table YAML")
    parser.add_argument("--out", help="Output path; defaults to output/gantt_chart.<format>")
    parser.add_argument("--format", choices=FORMATS, default="html", help="Output format")
    parser.add_argument(
        "--skip-weekends",
        action="store_true",
        help="Leave Saturdays and Sundays out of the timeline",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log range and row details")
    parser.add_argument(
        "--view",
        dest="view",
        action="store_true",
        default=False,
        help="Best-effort open the output file after rendering",
    )
    parser.add_argument(
        "--no-view",
        dest="view",
        action="store_false",
        help="Do not open the output file after rendering",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    table_path = Path(args.table)
    out_path = Path(args.out or f"output/gantt_chart.{args.format}")

    try:
        table: Table = load_table(str(table_path))
    except (yaml.YAMLError, TableValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except FileNotFoundError:
        print(f"Error: table file not found: {table_path}", file=sys.stderr)
        return 1
    except Exception as exc:  # Unexpected
        logger.debug("Loading failed", exc_info=True)
        print(f"Unexpected error while loading table: {exc}", file=sys.stderr)
        return 1

    try:
        chart: GanttChart = build_chart(table, skip_weekends=args.skip_weekends)
    except (MissingColumnError, InsufficientDataError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except Exception as exc:
        logger.debug("Layout failed", exc_info=True)
        print(f"Unexpected error while laying out timeline: {exc}", file=sys.stderr)
        return 1

    try:
        if args.format == "svg":
            render_svg(chart, out_path=str(out_path))
        else:
            write_html(chart, out_path=str(out_path))
    except Exception as exc:
        logger.debug("Rendering failed", exc_info=True)
        print(f"Unexpected error while rendering: {exc}", file=sys.stderr)
        return 1

    logger.info("Wrote %s", out_path)

    if args.view:
        try:
            webbrowser.open(out_path.resolve().as_uri())
        except webbrowser.Error:
            logger.warning("Could not open %s", out_path)

    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
