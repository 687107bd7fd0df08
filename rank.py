"""
Keyword Rank Tracker

Finds where a target domain ranks in search results for a set of keywords.
"""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path

from rich.console import Console

from serp.core.types import KeywordOutcome
from serp.fetcher.google import GooglePageFetcher
from serp.resolver import RankResolver
from tracker import (
    CancellationToken,
    ConfigError,
    ProgressTracker,
    ResultWriter,
    RetryingOrchestrator,
    format_rank,
    load_config,
    resolve_target_domain,
    setup_logging,
)

# Setup logger
logger = logging.getLogger(__name__)

console = Console()


def parse_args(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description="Keyword Rank Tracker")
    parser.add_argument("--config", default="config.json", help="Config file path")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Single keyword
    check_parser = subparsers.add_parser("check", help="Resolve one keyword")
    check_parser.add_argument("keyword", help="Keyword to search")
    check_parser.add_argument("--site", help="Site alias or domain")
    check_parser.add_argument("--max-pages", type=int, help="Result pages to scan")

    # Keyword set
    run_parser = subparsers.add_parser("run", help="Resolve a keyword set with retries")
    source = run_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--keywords", nargs="+", help="Keywords to search")
    source.add_argument(
        "--keywords-file", type=Path, help="File with one keyword per line"
    )
    run_parser.add_argument("--site", help="Site alias or domain")
    run_parser.add_argument("--max-pages", type=int, help="Result pages to scan")
    run_parser.add_argument("--retry-budget", type=int, help="Retry rounds for failures")
    run_parser.add_argument(
        "--delay", type=float, help="Seconds to wait between requests"
    )
    run_parser.add_argument("--output-dir", type=Path, help="Write results here")
    run_parser.add_argument("--log-file", type=Path, help="Log file path")

    return parser.parse_args(argv)


def read_keywords(path: Path) -> list[str]:
    """Read keywords from a file, one per line, skipping blanks and duplicates"""
    keywords = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            keyword = line.strip()
            if keyword and keyword not in keywords:
                keywords.append(keyword)
    return keywords


def print_outcome(outcome: KeywordOutcome) -> None:
    rank_text, detail = format_rank(outcome)
    console.print(f"[bold]{outcome.keyword}[/bold]: {rank_text} {detail}".rstrip())
    if outcome.source_url:
        console.print(f"  source: {outcome.source_url}")
    if outcome.error_message:
        console.print(f"  [red]{outcome.error_message}[/red]")
    for entry in outcome.entries:
        console.print(f"  {entry.rank:>3}. {entry.title} - {entry.url}")


async def check(args, config) -> int:
    target_domain = resolve_target_domain(args.site, config)
    resolver = RankResolver(GooglePageFetcher(config.fetcher), config.max_pages)
    outcome = await resolver.resolve(args.keyword, target_domain, args.max_pages)
    print_outcome(outcome)
    return 1 if outcome.is_error else 0


async def run(args, config) -> int:
    target_domain = resolve_target_domain(args.site, config)
    keywords = args.keywords or read_keywords(args.keywords_file)

    max_pages = args.max_pages or config.max_pages
    retry_budget = (
        args.retry_budget if args.retry_budget is not None else config.retry_budget
    )
    delay = args.delay if args.delay is not None else config.courtesy_delay

    if args.log_file:
        setup_logging(args.log_file)

    logger.info(f"Starting rank run for '{target_domain}'")
    logger.info(f"Keywords to process: {len(keywords)}")

    resolver = RankResolver(GooglePageFetcher(config.fetcher), max_pages)
    orchestrator = RetryingOrchestrator(resolver, courtesy_delay=delay)

    # Ctrl+C stops at the next keyword boundary instead of mid-request
    cancel_token = CancellationToken()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancel_token.cancel)
    except NotImplementedError:
        pass  # Windows event loops

    progress = ProgressTracker(target_domain, console=console)
    try:
        with progress.progress:
            progress.start(len(keywords))
            outcomes = await orchestrator.run(
                keywords,
                target_domain,
                retry_budget=retry_budget,
                on_update=progress.update,
                cancel_token=cancel_token,
            )
    finally:
        try:
            loop.remove_signal_handler(signal.SIGINT)
        except NotImplementedError:
            pass

    if cancel_token.cancelled:
        console.print("[yellow]Run cancelled[/yellow]")

    progress.show_completion_summary(outcomes)

    if args.output_dir:
        ResultWriter(args.output_dir).write(outcomes)
        console.print(f"\nResults saved to: {args.output_dir}")

    return 1 if any(o.is_error for o in outcomes.values()) else 0


async def main(argv=None) -> int:
    """Main entry point"""
    args = parse_args(argv)
    setup_logging()

    try:
        config = load_config(args.config)
        if args.command == "check":
            return await check(args, config)
        return await run(args, config)
    except (ConfigError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        return 2


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
