#!/usr/bin/env python3
"""Run Khanabi commands from a file or stdin and print one summary per game."""

import argparse
import logging
import sys
from dotenv import load_dotenv
from pathlib import Path

load_dotenv(Path(__file__).parent.parent / ".env")

from src.khanabi import KhanabiConfig, run_session


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run a Khanabi command stream",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands, one per line:
  Start x x x x R1 G1 B1 ...
  Play x <position>
  Drop x <position>
  Tell color <Color> x x <position>...
  Tell rank <rank> x x <position>...
""",
    )
    parser.add_argument("file", nargs="?", default=None, help="Command file (default: stdin)")
    parser.add_argument("--hand-size", type=positive_int, default=None,
                        help="Cards per hand (default: KHANABI_HAND_SIZE or 5)")
    parser.add_argument("--lenient-card-codes", action="store_true",
                        help="Treat unknown color letters in card codes as Blue")
    parser.add_argument("--records-dir", default=None, help="Write one JSON record per game here")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every turn")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log warnings")
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    if args.quiet:
        logging.basicConfig(level=logging.WARNING)
    elif args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    try:
        config = KhanabiConfig.from_env(
            hand_size=args.hand_size,
            lenient_card_codes=True if args.lenient_card_codes else None,
        )
    except ValueError as e:
        parser.error(f"Invalid configuration: {e}")

    def on_event(event: str, payload: dict) -> None:
        if event == "game_over":
            print(payload["line"], flush=True)

    if args.file:
        with open(args.file, "r") as f:
            records = run_session(f, config, emit_fn=on_event)
    else:
        records = run_session(sys.stdin, config, emit_fn=on_event)

    if args.records_dir:
        for record in records:
            path = record.save(args.records_dir)
            logging.getLogger(__name__).info(f"Saved {path}")


if __name__ == "__main__":
    main()
