"""Main CLI entry point."""

import argparse
import json
import logging
import sys
from pathlib import Path

CATEGORY_CHOICES = ["job", "cart", "stock", "selectProductsForRepair", "excelUploads", "all"]

# File names read by --input-dir (one per API endpoint)
INPUT_FILES = {
    "products": "products.json",
    "suppliers": "suppliers.json",
    "jobs": "jobs.json",
    "excel_uploads": "excel-uploads.json",
}


def main() -> None:
    """Parse args and dispatch to subcommands."""
    parser = argparse.ArgumentParser(prog="log-history", description="Product, supplier and repair-job change logs")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings YAML (api base_url, timeout, export_filename)",
    )
    parser.add_argument(
        "--base-url",
        type=str,
        default=None,
        help="API host, e.g. http://localhost:5002 (overrides config and LOG_HISTORY_API_BASE_URL)",
    )
    parser.add_argument(
        "--input-dir",
        type=Path,
        default=None,
        help="Read products.json, suppliers.json, jobs.json (and excel-uploads.json) instead of calling the API",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # logs
    logs_parser = subparsers.add_parser("logs", help="Show the log view for a category")
    logs_parser.add_argument(
        "--category",
        default="job",
        choices=CATEGORY_CHOICES,
        help="Category to show (default: job)",
    )
    logs_parser.add_argument(
        "--raw",
        action="store_true",
        help="Print normalized log entries instead of display rows",
    )
    logs_parser.add_argument(
        "--explain",
        action="store_true",
        help="Include classification explanations (with --raw)",
    )
    logs_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write JSON to file (default: stdout)",
    )

    # export
    export_parser = subparsers.add_parser("export", help="Export a category's log entries to Excel")
    export_parser.add_argument(
        "--category",
        default="all",
        choices=CATEGORY_CHOICES,
        help="Category to export (default: all)",
    )
    export_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Workbook path (default: Log_History.xlsx)",
    )

    # stats
    subparsers.add_parser("stats", help="Entry counts per category and stock page")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "logs":
        _run_logs(args)
    elif args.command == "export":
        _run_export(args)
    elif args.command == "stats":
        _run_stats(args)
    else:
        parser.print_help()


def _open_session(args: argparse.Namespace):
    """Build a session from settings and load it from the API or --input-dir."""
    from log_history.config import Settings
    from log_history.exceptions import InputShapeError
    from log_history.session import LogSession

    settings = Settings.load(args.config)
    if args.base_url:
        settings = settings.model_copy(update={"api_base_url": args.base_url})
    session = LogSession(settings)

    if args.input_dir is None:
        session.load()
        return session

    payloads = {}
    for key, filename in INPUT_FILES.items():
        path = args.input_dir / filename
        if not path.exists():
            if key == "excel_uploads":
                payloads[key] = []
                continue
            raise SystemExit(f"Missing {path}")
        try:
            payloads[key] = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise SystemExit(f"Invalid JSON in {path}: {e}")
    try:
        session.load_payloads(
            payloads["products"],
            payloads["suppliers"],
            payloads["jobs"],
            excel_uploads=payloads["excel_uploads"],
        )
    except InputShapeError as e:
        raise SystemExit(str(e))
    return session


def _emit(data, output: Path | None, count: int, what: str) -> None:
    text = json.dumps(data, indent=2, default=str)
    if output:
        output.write_text(text, encoding="utf-8")
        print(f"Wrote {count} {what} to {output}")
    else:
        print(text)


def _run_logs(args: argparse.Namespace) -> None:
    """Run logs command."""
    from log_history.classification import LogClassifier
    from log_history.models.category import EMPTY_MESSAGES, Category

    category = Category(args.category)
    with _open_session(args) as session:
        if args.raw:
            entries = session.selected_entries(category)
            if args.explain:
                results = LogClassifier().classify_many(entries)
                data = [r.model_dump(mode="json", by_alias=True) for r in results]
            else:
                data = [e.model_dump(mode="json", by_alias=True) for e in entries]
        else:
            rows = session.select_category(category)
            data = [r.to_display() for r in rows]

    if not data:
        print(EMPTY_MESSAGES.get(category, "No logs found."), file=sys.stderr)
    _emit(data, args.output, len(data), f"{category.label} rows")


def _run_export(args: argparse.Namespace) -> None:
    """Run export command."""
    from log_history.models.category import Category

    category = Category(args.category)
    with _open_session(args) as session:
        count = len(session.selected_entries(category))
        path = session.export(args.output, category)
    print(f"Exported {count} log entries ({category.label}) to {path}")


def _run_stats(args: argparse.Namespace) -> None:
    """Print entry counts per category and the stock page breakdown."""
    from collections import Counter

    from log_history.classification import infer_stock_page, select
    from log_history.models.category import Category

    with _open_session(args) as session:
        entries = session.entries

    total = len(entries)
    print(f"--- {total} log entries ---")
    for category in Category:
        if category == Category.EXCEL_UPLOADS:
            continue
        count = len(select(entries, category))
        pct = 100 * count / total if total else 0.0
        print(f"  {category.label}: {count} ({pct:.1f}%)")

    pages: Counter[str] = Counter(infer_stock_page(e).value for e in select(entries, Category.STOCK))
    if pages:
        print("\n--- Stock edits by page ---")
        for page, count in pages.most_common():
            print(f"  {page}: {count}")


if __name__ == "__main__":
    main()
