"""
Run from project root:
  python -m u8arc path/to/dir -o path/to/output.arc   # pack directory into .arc
  python -m u8arc path/to/dir --dry-run               # show node count and layout only
  python -m u8arc --gui                               # open the pack dialog
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from u8arc.errors import ArcError
from u8arc.writer import plan_archive, write_archive


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="u8arc",
        description="Pack a directory into a U8 archive (.arc).",
    )
    ap.add_argument("source", type=Path, nargs="?", help="Directory to pack")
    ap.add_argument("-o", "--output", type=Path, help="Output .arc path (required unless --dry-run)")
    ap.add_argument("--dry-run", action="store_true", help="Walk the directory and print the layout; write nothing")
    ap.add_argument("--gui", action="store_true", help="Open the pack dialog")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log every node")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.gui:
        # customtkinter is only needed here
        from u8arc.wizard import run_wizard
        run_wizard(initial_source=args.source, initial_output=args.output)
        return 0

    if args.source is None:
        print("Error: source directory required (or use --gui)", file=sys.stderr)
        return 1
    source = args.source.resolve()

    try:
        if args.dry_run:
            layout = plan_archive(source)
            print(f"{source}: {layout.node_count} node(s)")
            print(f"  string table  {layout.string_table_length:>10} bytes")
            print(f"  table length  {layout.table_length:>10} bytes")
            print(f"  data offset   0x{layout.data_offset:08X}")
            return 0

        if args.output is None:
            print("Error: -o / --output is required (path to the .arc to create)", file=sys.stderr)
            return 1
        layout = write_archive(args.output, source)
    except ArcError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Packed {layout.node_count} node(s) into {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
