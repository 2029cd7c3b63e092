"""CLI for running the attribution pipeline outside the API."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pipeline.attribution.colors import get_color_registry
from pipeline.attribution.emitter import OffsetUnits, emit_spans
from pipeline.attribution.engine import AttributionResult, attribute_snapshots
from pipeline.attribution.errors import EmptyOrSingleSnapshot, NoHistoryAvailable
from pipeline.attribution.models import Snapshot
from pipeline.sync.client import SyncHistoryClient, fetch_snapshots

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)-5.5s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def load_snapshots(path: Path) -> list[Snapshot]:
    """Load snapshots from a JSON file.

    Accepts either a list of ``{timestamp, author, content}`` objects or an
    object with a ``snapshots`` key holding that list.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("snapshots", [])
    return [
        Snapshot(
            timestamp=int(item["timestamp"]),
            author=str(item["author"]),
            content=item.get("content"),
        )
        for item in data
    ]


def _report(
    result: AttributionResult, as_json: bool, offset_units: OffsetUnits
) -> None:
    spans = emit_spans(
        result.groups,
        get_color_registry(),
        content=result.content,
        offset_units=offset_units,
    )

    if as_json:
        payload: dict[str, Any] = {
            "length": result.length,
            "groups": [
                {"start": g.start, "end": g.end, "author": g.author}
                for g in result.groups
            ],
            "spans": [
                {"start": s.start, "end": s.end, "color": s.color, "author": s.author}
                for s in spans
            ],
        }
        print(json.dumps(payload, indent=2))
        return

    print(f"\nAttributed {result.length} characters")
    print(f"  Transitions: {len(result.boundaries) - 1}")
    print(f"  Skipped: {result.report.pairs_skipped}")
    print(f"  Groups: {len(result.groups)}")
    for span in spans:
        text = ""
        if result.content is not None and offset_units == OffsetUnits.CODEPOINT:
            text = result.content[span.start : span.end]
            if len(text) > 40:
                text = text[:37] + "..."
        print(
            f"    [{span.start:>6}, {span.end:>6}) {span.color:<8} {span.author}  {text!r}"
        )


def attribute_file_command(
    path: Path, as_json: bool = False, offset_units: OffsetUnits = OffsetUnits.CODEPOINT
) -> int:
    """Attribute a snapshot history stored in a JSON file."""
    try:
        snapshots = load_snapshots(path)
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.error(f"Could not read snapshots from {path}: {e}")
        return 1

    try:
        result = attribute_snapshots(snapshots)
    except EmptyOrSingleSnapshot as e:
        logger.error(str(e))
        return 1

    _report(result, as_json, offset_units)
    return 0


async def attribute_document_command(
    document_id: str,
    base_url: str | None,
    as_json: bool = False,
    offset_units: OffsetUnits = OffsetUnits.CODEPOINT,
) -> int:
    """Fetch a document's history from the sync backend and attribute it."""
    if base_url is None:
        from app.config import settings

        base_url = settings.sync_base_url

    backend = SyncHistoryClient(base_url) if base_url else None
    try:
        snapshots = await fetch_snapshots(backend, document_id)
        result = attribute_snapshots(snapshots)
    except (NoHistoryAvailable, EmptyOrSingleSnapshot) as e:
        logger.error(f"No attribution for {document_id}: {e}")
        return 1

    _report(result, as_json, offset_units)
    return 0


def main() -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(description="Authorship attribution pipeline CLI")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Attribute command
    attribute_parser = subparsers.add_parser(
        "attribute", help="Attribute a snapshot history from a JSON file"
    )
    attribute_parser.add_argument("path", type=Path, help="JSON snapshot file")

    # Document command
    document_parser = subparsers.add_parser(
        "document", help="Fetch and attribute a document from the sync backend"
    )
    document_parser.add_argument("document_id", help="Document path on the backend")
    document_parser.add_argument(
        "--base-url",
        default=None,
        help="Sync backend URL (default: SYNC_BASE_URL setting)",
    )

    for sub in (attribute_parser, document_parser):
        sub.add_argument("--json", action="store_true", help="Print JSON output")
        sub.add_argument(
            "--units",
            choices=[u.value for u in OffsetUnits],
            default=OffsetUnits.CODEPOINT.value,
            help="Offset units for emitted spans (default: codepoint)",
        )

    args = parser.parse_args()

    if args.command == "attribute":
        return attribute_file_command(
            args.path, as_json=args.json, offset_units=OffsetUnits(args.units)
        )

    elif args.command == "document":
        return asyncio.run(
            attribute_document_command(
                args.document_id,
                args.base_url,
                as_json=args.json,
                offset_units=OffsetUnits(args.units),
            )
        )

    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
