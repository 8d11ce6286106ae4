"""
Command-line front end.

Usage:
  ztags [-o OUTPUT] [-a] [-r] [--imports JSON] FILE...

Indexes each FILE and every .zig file it imports, then writes a sorted tags
file to OUTPUT (default: ./tags, '-' for stdout).
"""

import argparse
import json
import os
import sys
from pathlib import Path

from . import krono
from .errors import ZtagsError
from .tags import Tags
from .traversal import TagFinder

DEFAULT_OUTPUT = "tags"


def build_parser():
    ap = argparse.ArgumentParser(prog="ztags", description="Generate a tags file for Zig source files.")
    ap.add_argument("files", nargs="+", metavar="FILE")
    ap.add_argument("-o", "--output", default=DEFAULT_OUTPUT,
                    help=f"Tags file to write, '-' for stdout (default: {DEFAULT_OUTPUT})")
    ap.add_argument("-a", "--append", action="store_true",
                    help="Merge with the entries already in OUTPUT")
    ap.add_argument("-r", "--relative", action="store_true",
                    help="Write file paths relative to the current directory")
    ap.add_argument("--imports", metavar="JSON",
                    help="Also write the import graph to this JSON file")
    ap.add_argument("-v", "--verbose", action="store_true",
                    help="Trace per-file progress to stderr (same as ZTAGS_TRACE=1)")
    return ap


def write_imports(finder, out_path):
    graph = finder.imports()
    cycles = finder.import_cycles()
    out = {
        "files": graph,
        "cycles": cycles,
    }
    Path(out_path).write_text(json.dumps(out, indent=2) + "\n", encoding="utf-8")
    print(f"# Import graph: {len(graph)} files, {finder.graph.number_of_edges()} imports, "
          f"{len(cycles)} cycles", file=sys.stderr)


def merge_existing(store, existing):
    """Carry entries of `existing` over into `store`, except for files indexed in this run."""
    indexed = set(store.visited)
    kept = 0
    for entry in existing.entries:
        path = os.path.abspath(entry.filename)
        if path in indexed:
            continue
        store.add(entry.ident, path, entry.text, entry.kind)
        kept += 1
    return kept


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        krono.set_enabled(True)

    store = Tags()
    to_stdout = args.output == "-"

    try:
        existing = Tags()
        if args.append and not to_stdout and os.path.exists(args.output):
            existing.read(Path(args.output).read_text(encoding="utf-8", errors="replace"))
            krono.trace(f"read {len(existing)} existing tags from {args.output}")

        finder = TagFinder(store)
        for path in args.files:
            finder.find_tags(path)

        if existing.entries:
            kept = merge_existing(store, existing)
            krono.trace(f"kept {kept} of {len(existing)} existing tags")

        contents = store.write(relative=args.relative)

        if to_stdout:
            sys.stdout.write(contents)
        else:
            Path(args.output).write_text(contents, encoding="utf-8")
            print(f"Wrote {len(store)} tags to {args.output}", file=sys.stderr)

        if args.imports:
            write_imports(finder, args.imports)
    except (ZtagsError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
