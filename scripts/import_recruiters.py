#!/usr/bin/env python3
"""
Recruiter Bulk Import Script

Imports recruiters from a published Google Sheet or a local CSV file into
the MongoDB recruiters collection, using the same pipeline as the
POST /recruiters/bulk-import endpoint.

Usage:
    python scripts/import_recruiters.py --sheet-url "https://docs.google.com/spreadsheets/d/<id>/edit"
    python scripts/import_recruiters.py --csv-file recruiters.csv --allow-duplicates
    python scripts/import_recruiters.py --csv-file recruiters.csv --dry-run
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment before other imports
load_dotenv()

from src.common.config import Config
from src.common.csv_parser import parse_csv
from src.common.error_handling import ImportPreconditionError, RecruiterImportError
from src.common.logger import set_global_debug_mode, setup_logging
from src.services.recruiter_import_service import RecruiterImportService
from src.services.recruiter_validator import validate_rows

logger = logging.getLogger("recruiter_import")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Bulk import recruiters from a Google Sheet or CSV file"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--sheet-url", help="Published Google Sheets URL")
    source.add_argument("--csv-file", type=Path, help="Local CSV file with a header row")
    parser.add_argument(
        "--allow-duplicates",
        action="store_true",
        help="Do not pre-check existing emails (the unique index still rejects them)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse and validate a --csv-file without touching the database",
    )
    parser.add_argument(
        "--ensure-indexes",
        action="store_true",
        help="Create the unique email index before importing",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging",
    )
    return parser


def dry_run(csv_text: str) -> dict:
    """Validate CSV text locally and report what would be imported."""
    rows = parse_csv(csv_text)
    if not rows:
        return {"success": False, "error": "Sheet is empty or has no data rows"}
    try:
        records, errors = validate_rows(rows[0], rows[1:])
    except ImportPreconditionError as e:
        return {"success": False, "error": e.message, "errors": e.errors}
    return {
        "success": True,
        "dry_run": True,
        "stats": {
            "total_rows": len(rows) - 1,
            "valid_recruiters": len(records),
            "skipped_invalid": len(errors),
        },
        "errors": [str(e) for e in errors[:50]],
    }


def print_summary(response: dict, as_json: bool) -> None:
    if as_json:
        print(json.dumps(response, indent=2, default=str))
        return

    if not response.get("success"):
        print(f"Import failed: {response.get('error')}")
        for message in response.get("errors") or []:
            print(f"  - {message}")
        return

    print(response.get("message", "Dry run completed"))
    for key, value in response.get("stats", {}).items():
        print(f"  {key}: {value}")
    errors = response.get("errors")
    if isinstance(errors, dict):
        print(errors["message"])
        for message in errors["validation_errors"] + errors["insert_errors"]:
            print(f"  - {message}")
    elif errors:
        for message in errors:
            print(f"  - {message}")
    if response.get("warning"):
        print(f"Warning: {response['warning']}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    setup_logging(level="DEBUG" if args.verbose else Config.LOG_LEVEL, format=Config.LOG_FORMAT)
    if args.verbose:
        set_global_debug_mode(True)

    if args.dry_run:
        if not args.csv_file:
            logger.error("--dry-run requires --csv-file")
            return 2
        response = dry_run(args.csv_file.read_text(encoding="utf-8-sig"))
        print_summary(response, args.json)
        return 0 if response["success"] else 1

    problems = Config.validate()
    if problems:
        for problem in problems:
            logger.error(problem)
        return 1

    service = RecruiterImportService(log_callback=lambda message: logger.info(message))
    skip_duplicates = not args.allow_duplicates

    try:
        if args.ensure_indexes:
            service.ensure_indexes()
            logger.info("Unique email index ensured")

        if args.csv_file:
            result = service.import_csv_text(
                args.csv_file.read_text(encoding="utf-8-sig"),
                skip_duplicates=skip_duplicates,
                source=str(args.csv_file),
            )
        else:
            result = service.import_from_sheet(args.sheet_url, skip_duplicates=skip_duplicates)
    except ImportPreconditionError as e:
        print_summary({"success": False, "error": e.message, "errors": e.errors}, args.json)
        return 1
    except RecruiterImportError as e:
        logger.exception(f"Import failed: {e}")
        print_summary({"success": False, "error": str(e)}, args.json)
        return 1

    print_summary(result.to_response(), args.json)
    return 0


if __name__ == "__main__":
    sys.exit(main())
