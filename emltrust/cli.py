# emltrust/cli.py
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List

from .config import settings
from .services.analysis import analyze_eml
from .services.history import HistoryStore
from .services.storage import close_backend

LOG = logging.getLogger("emltrust.cli")


async def run_check(args) -> int:
    eml_files: List[Path] = []
    for raw in args.paths:
        target = Path(raw)
        if target.is_dir():
            eml_files += sorted(target.glob("*.eml"))
        elif target.is_file() and target.suffix.lower() == ".eml":
            eml_files.append(target)
        else:
            LOG.warning("Skipping %s: not an .eml file or a directory", raw)

    if not eml_files:
        print("No .eml files found.", file=sys.stderr)
        return 1

    history = None if args.no_history else HistoryStore()
    results = []
    errors = 0
    for eml_path in eml_files:
        try:
            assessment = await analyze_eml(
                eml_path.read_bytes(),
                history=history,
                dkim_selector=args.selector,
                use_dns=not args.no_dns,
            )
            results.append({"file": str(eml_path), **assessment.model_dump(mode="json")})
        except Exception as e:
            errors += 1
            LOG.exception("Error processing %s", eml_path)
            print(f"Error processing {eml_path}: {e}", file=sys.stderr)

    if errors:
        print(f"{errors} file(s) failed.", file=sys.stderr)

    report = {
        "report_generated": datetime.now(timezone.utc).isoformat(),
        "files_analyzed": len(results),
        "results": results,
    }
    output = json.dumps(report, indent=2, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(output + "\n")
        print(f"Report written to {args.output}", file=sys.stderr)
    else:
        print(output)
    return 0


async def run_history(args) -> int:
    store = HistoryStore()
    if args.action == "list":
        entries = [e.model_dump(mode="json") for e in await store.list()]
        print(json.dumps(entries, indent=2, ensure_ascii=False))
    elif args.action == "clear":
        await store.clear()
        print("History cleared.", file=sys.stderr)
    elif args.action == "remove":
        if not args.entry_id:
            print("remove needs an entry id", file=sys.stderr)
            return 2
        remaining = await store.remove(args.entry_id)
        print(f"{len(remaining)} history entries left.", file=sys.stderr)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="emltrust",
        description="Assess sender trust of .eml files from SPF, DKIM and DMARC.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Analyze .eml files")
    check.add_argument(
        "paths",
        nargs="+",
        help="One or more .eml files or directories containing .eml files",
    )
    check.add_argument("-o", "--output", help="Write JSON report to a file instead of stdout")
    check.add_argument("--selector", help="DKIM selector to query instead of the signature's")
    check.add_argument("--no-dns", action="store_true", help="Use embedded verdicts only")
    check.add_argument("--no-history", action="store_true", help="Do not record results")

    hist = sub.add_parser("history", help="Show or edit verification history")
    hist.add_argument("action", choices=["list", "clear", "remove"])
    hist.add_argument("entry_id", nargs="?")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    runner = run_check if args.command == "check" else run_history

    async def _run():
        try:
            return await runner(args)
        finally:
            await close_backend()

    sys.exit(asyncio.run(_run()))


if __name__ == "__main__":
    main()
