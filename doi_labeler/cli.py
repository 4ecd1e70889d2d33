"""
Command-line entry point.

    doi-labeler process "See https://doi.org/10.1038/nature12373" 10.1126/science.1234567
    doi-labeler stats
"""

import argparse
import sys

from .config import Config
from .logging_config import setup_logging
from .pipeline import build_pipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="doi-labeler", description="Resolve DOIs in text to moderation badges."
    )
    parser.add_argument("--cache-file", help="Path to the JSON cache (default: CACHE_FILE)")
    parser.add_argument("--log-level", help="Logging level (default: LOG_LEVEL or INFO)")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")

    sub = parser.add_subparsers(dest="command", required=True)
    process = sub.add_parser("process", help="Extract a DOI from each argument and label it")
    process.add_argument("texts", nargs="+", metavar="TEXT")
    sub.add_parser("stats", help="Show cache size and credit usage")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config = Config()
    if args.cache_file:
        config.cache_file = args.cache_file
    setup_logging(args.log_level or config.log_level, json_format=args.json_logs or config.json_logs)

    pipeline = build_pipeline(config)

    if args.command == "stats":
        stats = pipeline.store.stats()
        print(f"Entries: {stats.total_entries}")
        print(f"Credits used: {stats.credits_used}/{stats.credit_limit}")
        return 0

    for text in args.texts:
        result = pipeline.process_text(text)
        print(f"{result.doi or '-'}\t{result.badge or '-'}\t{result.outcome.value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
