#!/usr/bin/env python3
"""
Market Pulse - Command Line Interface

One-shot batch jobs refreshing the dashboard documents. Meant to be triggered
by cron (e.g. every 15 minutes for the market, hourly for the news).

Usage:
    python cli.py market
    python cli.py news
    python cli.py all --output-dir public

Examples:
    # Refresh data.json
    python cli.py market

    # Refresh news.json using the last data.json as context
    python cli.py news

    # Both jobs, template commentary only
    python cli.py all --no-llm

    # Print the market document as JSON without writing it
    python cli.py market --format json --dry-run
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# Load environment variables FIRST before any imports that use settings
from dotenv import load_dotenv
load_dotenv()

from market_pulse.cli.formatter import OutputFormatter, console
from market_pulse.config.settings import settings
from market_pulse.pipeline import build_market_job, build_news_job
from market_pulse.utils.logging import configure_logging, verbosity_to_level


formatter = OutputFormatter()


def parse_arguments(argv: Optional[list] = None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Market Pulse - crypto market signal jobs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s market                            # Refresh data.json
  %(prog)s news                              # Refresh news.json
  %(prog)s all --output-dir public           # Both jobs into public/
  %(prog)s market --format json --dry-run    # Print without writing

Verbosity Levels:
  %(prog)s market --verbose=0                # Silent (errors only)
  %(prog)s market --verbose=1                # Normal (warnings + errors)
  %(prog)s market --verbose=2                # Detailed (info + warnings + errors)
  %(prog)s market --verbose=3                # Debug (full verbose output)
        """,
    )

    parser.add_argument(
        "job",
        nargs="?",
        choices=["market", "news", "all"],
        default="market",
        help="Job to run (default: market)",
    )

    parser.add_argument(
        "--output-dir",
        "-o",
        type=str,
        help="Directory for data.json and news.json (default: current directory)",
    )

    parser.add_argument(
        "--format",
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        nargs="?",
        const=2,
        type=int,
        choices=[0, 1, 2, 3],
        default=1,
        help="Verbosity level: 0=errors-only, 1=normal (default), 2=detailed, 3=debug",
    )

    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Silent mode (equivalent to --verbose=0), no summary printed",
    )

    parser.add_argument(
        "--no-llm",
        action="store_true",
        help="Skip the language model and use template commentary",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run the jobs without writing the documents",
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    return parser.parse_args(argv)


def output_path(output_dir: Optional[str], filename: str) -> Path:
    """Resolve a document path inside the optional output directory."""
    path = Path(filename)
    if output_dir and not path.is_absolute():
        return Path(output_dir) / path
    return path


def show(document: Dict[str, Any], kind: str, output_format: str) -> None:
    """Print a job result."""
    if output_format == "json":
        console.print_json(formatter.format_json(document))
    elif kind == "market":
        formatter.format_market(document)
    else:
        formatter.format_news(document)


async def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    args = parse_arguments(argv)

    verbosity_level = 0 if args.quiet else args.verbose
    configure_logging(level=verbosity_to_level(verbosity_level))

    if args.no_color:
        console.no_color = True

    data_path = output_path(args.output_dir, settings.output.DATA_PATH)
    news_path = output_path(args.output_dir, settings.output.NEWS_PATH)
    use_llm = not args.no_llm
    write = not args.dry_run

    try:
        if args.job in ("market", "all"):
            if not args.quiet:
                formatter.print_progress("Fetching market data...")
            job = build_market_job(output_path=data_path, use_llm=use_llm)
            document = await job.run(write=write)
            if not args.quiet:
                show(document, "market", args.format)
                if write:
                    formatter.print_success(f"Market data saved to {data_path}")

        if args.job in ("news", "all"):
            if not args.quiet:
                formatter.print_progress("Fetching news...")
            job = build_news_job(output_path=news_path, data_path=data_path, use_llm=use_llm)
            document = await job.run(write=write)
            if not args.quiet:
                show(document, "news", args.format)
                if write:
                    formatter.print_success(f"News saved to {news_path}")

    except Exception as e:
        formatter.print_error(f"Fatal error: {e}")
        if verbosity_level >= 3:
            import traceback
            console.print(traceback.format_exc())
        return 1

    return 0


def run() -> None:
    """Console script entry point."""
    try:
        code = asyncio.run(main())
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    run()
