#!/usr/bin/env python3
"""
Equilibro CLI — offline report generation and API server.

USAGE:
  python -m equilibro.cli process                              # All schools, default catalog
  python -m equilibro.cli process --schools RMIC81500X RMPS12000A
  python -m equilibro.cli process --input adozioni.csv --output ./out

  python -m equilibro.cli serve                                # Start API server
  python -m equilibro.cli serve --port 8000
"""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from equilibro.config import OUTPUT_FOLDER, INPUT_CSV_CANDIDATES, SCHOOLS_CSV
from equilibro.data.archive import build_archive
from equilibro.data.pipeline import build_bundle
from equilibro.data.schemas import archive_name
from equilibro.data.sessions import SessionStore
from equilibro.data.store import ReferenceData


def cmd_process(args) -> int:
    """Generate the three reports and write them as a ZIP."""
    print("\n" + "=" * 70)
    print("  EQUILIBRO — REPORT GENERATOR")
    print("=" * 70)

    inputs = [Path(args.input)] if args.input else INPUT_CSV_CANDIDATES
    ref = ReferenceData(input_paths=inputs, schools_path=Path(args.schools_csv)).load()
    if ref.row_count() == 0:
        print("\nNo adoption rows found — nothing to process.")
        return 1

    bundle = build_bundle(ref.catalog, ref.schools, args.schools)
    session_id = SessionStore.new_id()

    out_dir = Path(args.output)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / archive_name(session_id)
    out_path.write_bytes(build_archive(bundle.files(session_id)))

    for name, content in bundle.files(session_id).items():
        rows = max(len(content.splitlines()) - 1, 0)
        print(f"  {name}: {rows:,} rows")
    print(f"\nSaved: {out_path}")
    return 0


def cmd_serve(args) -> int:
    """Start the API server."""
    import uvicorn
    print(f"\nStarting Equilibro API on port {args.port}...")
    uvicorn.run("equilibro.main:app", host="0.0.0.0", port=args.port, reload=args.reload,
                timeout_keep_alive=65)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Equilibro — textbook adoption reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    # process subcommand
    process_parser = subparsers.add_parser("process", help="Generate reports as a ZIP")
    process_parser.add_argument("--schools", nargs="*", help="School codes (default: all)")
    process_parser.add_argument("--input", help="Adoption catalog CSV (default: configured catalog)")
    process_parser.add_argument("--schools-csv", default=str(SCHOOLS_CSV), help="School directory CSV")
    process_parser.add_argument("--output", default=str(OUTPUT_FOLDER), help="Output directory")
    process_parser.set_defaults(func=cmd_process)

    # serve subcommand
    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
