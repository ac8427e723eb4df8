"""Command-line driver: complete a text grid and print the result.

Usage:
  shapecomplete grid.txt                       # prints the completed grid
  shapecomplete grid.txt --tolerance 0         # hull-only growth
  shapecomplete grid.txt --format hex          # packed snapshot as hex
  cat grid.txt | shapecomplete -               # read from stdin

Grid files hold one row per line: ``?`` unknown, ``.`` free, ``#`` occupied.
"""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

from shapecomplete.config import settings
from shapecomplete.engine.completer import Completer
from shapecomplete.engine.config import CompletionConfig
from shapecomplete.engine.errors import ShapeCompletionError
from shapecomplete.engine.grid import Grid
from shapecomplete.engine.snapshot import export_snapshot

logger = logging.getLogger(__name__)


def configure_logging(level: str | None = None) -> None:
    level = level or settings.shapecomplete_log_level
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    defaults = CompletionConfig.from_settings(settings)
    parser = argparse.ArgumentParser(
        prog="shapecomplete",
        description="Complete a partially observed occupancy grid",
    )
    parser.add_argument("input", help="Grid text file, or - for stdin")
    parser.add_argument("--tolerance", type=float, default=defaults.tolerance,
                        help="Max distance in cells outside the observed hull")
    parser.add_argument("--max-iterations", type=int, default=defaults.max_iterations,
                        help="Growth iterations per region")
    parser.add_argument("--connectivity", type=int, choices=(4, 8), default=defaults.connectivity,
                        help="Growth neighbourhood")
    parser.add_argument("--no-fill-enclosed", dest="fill_enclosed", action="store_false",
                        default=defaults.fill_enclosed,
                        help="Leave enclosed unknown pockets to the closed-world default")
    parser.add_argument("--format", choices=("text", "hex"), default="text",
                        help="Output format")
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        if args.input == "-":
            rows = sys.stdin.read().splitlines()
        else:
            with open(args.input, encoding="utf-8") as f:
                rows = f.read().splitlines()
        grid = Grid.from_rows(rows)
        config = CompletionConfig(
            connectivity=args.connectivity,
            tolerance=args.tolerance,
            max_iterations=args.max_iterations,
            fill_enclosed=args.fill_enclosed,
        )
        completed = Completer(config).complete(grid)
    except ShapeCompletionError as e:
        print(f"ERROR [{e.kind.value}]: {e}", file=sys.stderr)
        return 2
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.format == "hex":
        print(export_snapshot(completed).to_bytes().hex())
    else:
        print(completed.to_text())
    return 0


if __name__ == "__main__":
    sys.exit(main())
