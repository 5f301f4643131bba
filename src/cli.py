"""CLI entry point: recover JSON from a file or stdin."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

from src.models.recovery import ParseOptions
from src.parsing.orchestrator import recover


def main(argv: list[str] | None = None):
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Recover a JSON value from noisy LLM agent output",
    )
    parser.add_argument("input", nargs="?", default="-",
                        help="File to read (default: stdin)")
    parser.add_argument("--no-fix", action="store_true", help="Disable the grammar fixer pass")
    parser.add_argument("--max-blocks", type=int, default=5,
                        help="Maximum embedded blocks to try")
    parser.add_argument("--prefer-longest", action="store_true",
                        help="Try the longest embedded block first instead of the leftmost")
    parser.add_argument("--allow-partial", action="store_true",
                        help="Accept a value followed by trailing text")
    parser.add_argument("--unwrap-depth", type=int, default=3,
                        help="Levels of double-encoded JSON to unwrap (0 disables)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    parser.add_argument("--json", action="store_true", help="Output the full result as JSON")

    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.input == "-":
        text = sys.stdin.read()
    else:
        with open(args.input, encoding="utf-8") as f:
            text = f.read()

    options = ParseOptions(
        attempt_fix=not args.no_fix,
        max_blocks=args.max_blocks,
        prefer_first=not args.prefer_longest,
        allow_partial=args.allow_partial,
        unwrap_depth=args.unwrap_depth,
    )
    result = recover(text, options)

    if args.json:
        print(result.model_dump_json(indent=2))
    elif result.succeeded:
        print(json.dumps(result.data, indent=2, ensure_ascii=False))
        print(f"strategy: {result.strategy_used.value}", file=sys.stderr)

    if not result.succeeded:
        if not args.json:
            print("No JSON value could be recovered", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
