from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from .analysis import aggregate
from .app import build_runtime, configure_logging
from .config import load_config
from .csv_rows import read_csv_rows
from .report.errors import ReportError, ReportInputError
from .report.report_data import ReportRequest


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a QA summary PDF report from a CSV export")
    parser.add_argument("input", type=Path, help="Input test-case export (.csv)")
    parser.add_argument(
        "--status",
        default="",
        help="General status shown on the summary page, e.g. PASSED_WITH_ISSUES",
    )
    parser.add_argument("--notes", default=None, help="Free-text notes for the last page")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output PDF path (default: <input_stem>_report.pdf)",
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to config YAML")
    parser.add_argument(
        "--summary-json",
        type=Path,
        default=None,
        help="Optional path to write computed summary JSON",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    if not args.input.exists():
        print(f"Error: input file not found: {args.input}", file=sys.stderr)
        return 1
    try:
        config = load_config(args.config)
    except ValueError as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return 1
    configure_logging(config.logging.level)

    try:
        rows = read_csv_rows(args.input)
    except ReportInputError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    renderer = build_runtime(config).renderer
    out_pdf = args.output or args.input.with_name(f"{args.input.stem}_report.pdf")
    request = ReportRequest(rows=rows, general_status=args.status, notes=args.notes)
    try:
        artifact = asyncio.run(renderer.render(request, out_pdf))
    except ReportError as exc:
        print(f"Error: PDF generation failed: {exc}", file=sys.stderr)
        return 1
    print(f"wrote report: {artifact.path} ({artifact.page_count} pages)")

    if args.summary_json is not None:
        args.summary_json.parent.mkdir(parents=True, exist_ok=True)
        summary = aggregate(rows).to_dict()
        args.summary_json.write_text(json.dumps(summary, indent=2), encoding="utf-8")
        print(f"wrote summary: {args.summary_json}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
