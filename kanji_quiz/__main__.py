"""Command line entry point for kanji-quiz.

  python -m kanji_quiz serve [--port PORT] [--host HOST]
  python -m kanji_quiz stats [LEVEL]
"""
from __future__ import annotations

import argparse
import sys

from kanji_quiz.catalog import Catalog
from kanji_quiz.config import load_settings
from kanji_quiz.parsers.mappings_parser import parse_mappings_file


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(prog="kanji-quiz", description="Kanji reading self-study quiz")
    commands = parser.add_subparsers(dest="command")

    serve = commands.add_parser("serve", help="Run the quiz web app")
    serve.add_argument("--port", type=int, default=8765)
    serve.add_argument("--host", default="127.0.0.1")

    stats = commands.add_parser("stats", help="Genre breakdown of a local level file")
    stats.add_argument("level", type=int, nargs="?", help="Level number (default from config)")

    args = parser.parse_args(argv)
    if args.command == "stats":
        return _stats(args.level)
    if args.command is None:
        # Bare invocation serves on the defaults
        args = parser.parse_args(["serve"])
    return _serve(args.host, args.port)


def _serve(host: str, port: int):
    import uvicorn

    # Level data is fetched from the address the browser used to reach us,
    # so the chosen host/port needs no further wiring.
    print(f"Kanji Quiz on http://{host}:{port}  (Ctrl+C to stop)")
    uvicorn.run("kanji_quiz.app:app", host=host, port=port)


def _stats(level: int | None):
    settings = load_settings()
    if level is None:
        level = settings.default_level
    path = settings.local_mappings_path(level)
    if not path.exists():
        print(f"No mappings file for level {level}: {path}")
        sys.exit(1)

    catalog = Catalog.from_records(parse_mappings_file(path), settings.level_base(level), level=level)

    print(f"Level {level}: {len(catalog)} entries")
    for tag, count in catalog.genre_counts().items():
        print(f"  {tag:<18s}{count:>6d}")

    blank = sum(1 for e in catalog if not e.reading)
    if blank:
        print(f"{blank} entries have no reading")


if __name__ == "__main__":
    main()
