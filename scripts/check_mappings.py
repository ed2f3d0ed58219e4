"""Report suspicious rows in a level's mappings.csv before publishing it.

Flags: empty readings, unbalanced okurigana quotes, identifiers shared by
several rows, and tags that name none of the known genres.

Usage:
    python scripts/check_mappings.py LEVEL
    python scripts/check_mappings.py path/to/mappings.csv
"""
from __future__ import annotations

import sys
from collections import Counter
from pathlib import Path

from kanji_quiz.catalog import has_known_genre
from kanji_quiz.config import load_settings
from kanji_quiz.parsers.mappings_parser import parse_mappings_file
from kanji_quiz.reading import EMPHASIS, alternatives, core


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    arg = sys.argv[1]
    path = load_settings().local_mappings_path(int(arg)) if arg.isdigit() else Path(arg)
    if not path.exists():
        print(f"Not found: {path}")
        sys.exit(1)

    records = parse_mappings_file(path)
    print(f"{path}: {len(records)} rows\n")

    problems = 0
    # Row numbers are 1-based and count the header
    for row, r in enumerate(records, start=2):
        if not r.reading:
            print(f"  row {row} [{r.identifier}]: empty reading")
            problems += 1
            continue
        if r.reading.count(EMPHASIS) % 2:
            print(f"  row {row} [{r.identifier}]: unbalanced quote in {r.reading!r}")
            problems += 1
        if not any(core(alt) for alt in alternatives(r.reading)):
            print(f"  row {row} [{r.identifier}]: no typeable answer in {r.reading!r}")
            problems += 1
        if r.additional_info and not has_known_genre(r.additional_info):
            print(f"  row {row} [{r.identifier}]: unknown genre {r.additional_info!r}")

    dupes = {k: n for k, n in Counter(r.identifier for r in records).items() if n > 1}
    for ident, n in sorted(dupes.items()):
        print(f"  duplicate identifier {ident!r} ({n} rows)")

    print(f"\n{problems} problem rows, {len(dupes)} duplicate identifiers")


if __name__ == "__main__":
    main()
