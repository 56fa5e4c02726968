"""CLI entry point for sheetdiff.

Usage:
    python -m sheetdiff capture <spreadsheet_id_or_url> [--tier FULL]
    python -m sheetdiff compare <before_id_or_url> <after_id_or_url> [--tier FULL]

Both commands read Google Sheets with the token from --token or
SHEETDIFF_ACCESS_TOKEN, or golden files when --golden-dir is given.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import re
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sheetdiff.config import get_settings
from sheetdiff.engine import DiffEngine
from sheetdiff.models import DiffOptions, Tier
from sheetdiff.transport import GoogleSheetsDataSource, LocalFileDataSource

if TYPE_CHECKING:
    from sheetdiff.models import DatasetState
    from sheetdiff.transport import GridDataSource


def parse_spreadsheet_id(id_or_url: str) -> str:
    """Extract spreadsheet ID from a URL or return as-is if already an ID."""
    # https://docs.google.com/spreadsheets/d/SPREADSHEET_ID/edit...
    url_pattern = r"docs\.google\.com/spreadsheets/d/([a-zA-Z0-9_-]+)"
    match = re.search(url_pattern, id_or_url)
    if match:
        return match.group(1)
    return id_or_url


def state_summary(state: DatasetState) -> dict[str, Any]:
    """JSON-friendly summary of a captured state (cell values omitted)."""
    return {
        "documentId": state.document_id,
        "capturedAt": state.captured_at.isoformat(),
        "checksum": state.digest,
        "sheets": [
            {
                "sheetId": sheet.sheet_id,
                "title": sheet.title,
                "rowCount": sheet.row_count,
                "columnCount": sheet.column_count,
                "checksum": sheet.digest,
                "blocks": len(sheet.block_digests or ()),
                "sampledRows": (
                    len(sheet.sample.head_rows) + len(sheet.sample.tail_rows)
                    if sheet.sample
                    else 0
                ),
                "cellsCaptured": sheet.has_cells,
            }
            for sheet in state.sheets
        ],
    }


def _make_source(args: argparse.Namespace) -> GridDataSource | None:
    if args.golden_dir:
        return LocalFileDataSource(Path(args.golden_dir))
    settings = get_settings()
    token = args.token or settings.access_token
    if not token:
        print(
            "Error: no access token. Pass --token or set SHEETDIFF_ACCESS_TOKEN.",
            file=sys.stderr,
        )
        return None
    return GoogleSheetsDataSource(
        access_token=token, timeout=settings.request_timeout
    )


def _options(args: argparse.Namespace) -> DiffOptions:
    return DiffOptions(
        tier=Tier(args.tier) if args.tier else None,
        sample_size=args.sample_size,
        cell_budget=args.cell_budget,
    )


async def cmd_capture(args: argparse.Namespace) -> int:
    """Capture one spreadsheet and print a summary of the state."""
    source = _make_source(args)
    if source is None:
        return 1
    try:
        engine = DiffEngine(source)
        state = await engine.capture_state(
            parse_spreadsheet_id(args.spreadsheet), _options(args)
        )
        print(json.dumps(state_summary(state), indent=2, ensure_ascii=False))
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        await source.close()


async def cmd_compare(args: argparse.Namespace) -> int:
    """Capture two spreadsheets and print the diff between them as JSON."""
    source = _make_source(args)
    if source is None:
        return 1
    try:
        engine = DiffEngine(source)
        options = _options(args)
        before, after = await asyncio.gather(
            engine.capture_state(parse_spreadsheet_id(args.before), options),
            engine.capture_state(parse_spreadsheet_id(args.after), options),
        )
        result = await engine.diff(before, after, options)
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))

        requested = options.tier or engine.default_tier
        if result.tier is not requested:
            print(
                f"\n# Downgraded from {requested.value} to {result.tier.value}",
                file=sys.stderr,
            )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        await source.close()


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--tier",
        choices=[t.value for t in Tier],
        default=None,
        help="Diff tier (default: SHEETDIFF_DEFAULT_TIER or SAMPLE)",
    )
    parser.add_argument(
        "--sample-size",
        type=int,
        default=None,
        help="Rows per head/tail sample (default: 10)",
    )
    parser.add_argument(
        "--cell-budget",
        type=int,
        default=None,
        help="Maximum cells a full capture or diff may inspect (default: 5000)",
    )
    parser.add_argument(
        "--golden-dir",
        default=None,
        help="Read from local golden files instead of the Google Sheets API",
    )
    parser.add_argument(
        "--token",
        default=None,
        help="OAuth2 access token with sheets.readonly scope",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="sheetdiff",
        description="Tiered diffs of Google Sheets snapshots",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # capture subcommand
    capture_parser = subparsers.add_parser(
        "capture",
        help="Capture a spreadsheet and print a state summary",
    )
    capture_parser.add_argument(
        "spreadsheet",
        help="Spreadsheet ID or full Google Sheets URL",
    )
    _add_common_arguments(capture_parser)
    capture_parser.set_defaults(func=cmd_capture)

    # compare subcommand
    compare_parser = subparsers.add_parser(
        "compare",
        help="Capture two spreadsheets and print their diff",
    )
    compare_parser.add_argument("before", help="Spreadsheet ID or URL of the old state")
    compare_parser.add_argument("after", help="Spreadsheet ID or URL of the new state")
    _add_common_arguments(compare_parser)
    compare_parser.set_defaults(func=cmd_compare)

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else get_settings().log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    result: int = asyncio.run(args.func(args))
    return result


if __name__ == "__main__":
    sys.exit(main())
