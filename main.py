#!/usr/bin/env python3
"""
Command line entry point for the Reddit Agent.

Subcommands:
    ids START END [--max N]        Ids in (START, END], newest first
    next-ids LAST [--count N]      The N ids following LAST
    extract URL                    Product descriptor for a page
    discover --keyword P:K ...     One keyword discovery pass over new posts

Results are printed to stdout as JSON.
"""

import argparse
import json
import signal
import sys
import threading
from typing import List, Optional

from reddit_agent import config
from reddit_agent.exceptions import ExtractionError, InvalidCharacterError
from reddit_agent.models import KeywordEntry
from reddit_agent.utils.logging_config import (
    get_logger,
    setup_logging,
    validate_environment_variables,
)
from reddit_agent.utils.reddit_utils import (
    extract_post_id,
    generate_id_range,
    generate_next_id_range,
    validate_post_id,
)

logger = get_logger(__name__)


def parse_keyword(value: str) -> KeywordEntry:
    """Parse a PRODUCT_ID:KEYWORD argument."""
    product_id, sep, keyword = value.partition(":")
    if not sep or not product_id or not keyword.strip():
        raise argparse.ArgumentTypeError(
            f"Expected PRODUCT_ID:KEYWORD, got {value!r}"
        )
    return KeywordEntry(keyword=keyword.strip(), product_id=product_id)


def parse_post_id(value: str) -> str:
    """Accept a post id, fullname or Reddit link."""
    post_id = extract_post_id(value)
    if not validate_post_id(post_id):
        raise argparse.ArgumentTypeError(f"Not a Reddit post id or link: {value!r}")
    return post_id


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Reddit Agent command line tools")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set logging level (default: LOG_LEVEL or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    ids = subparsers.add_parser("ids", help="Generate ids between two post ids")
    ids.add_argument("start", help="Lower bound, excluded")
    ids.add_argument("end", help="Upper bound, included")
    ids.add_argument("--max", type=int, default=config.DEFAULT_ID_RANGE_MAX, dest="max_count")

    next_ids = subparsers.add_parser("next-ids", help="Generate the ids after a post id")
    next_ids.add_argument("last", help="Last post id already seen")
    next_ids.add_argument("--count", type=int, default=config.REDDIT_INFO_BATCH_SIZE)

    extract = subparsers.add_parser("extract", help="Extract a product descriptor from a URL")
    extract.add_argument("url")

    discover = subparsers.add_parser("discover", help="Scan new Reddit posts for keywords")
    discover.add_argument(
        "--since",
        type=parse_post_id,
        default=None,
        help="Last post id or link already scanned (default: newest post on r/all)",
    )
    discover.add_argument(
        "--keyword",
        type=parse_keyword,
        action="append",
        default=[],
        metavar="PRODUCT_ID:KEYWORD",
        help="Keyword to monitor, repeatable",
    )
    discover.add_argument("--scan-size", type=int, default=None)

    return parser


def run_extract(url: str) -> int:
    from reddit_agent.extraction_pipeline import ExtractionPipeline
    from reddit_agent.product_summarizer import ProductSummarizer

    if not validate_environment_variables(["OPENAI_API_KEY"], logger):
        logger.error("OPENAI_API_KEY is required for extraction")
        return 1

    cancel_event = threading.Event()

    def signal_handler(sig, frame):
        logger.info(f"Received signal {sig}, cancelling extraction...")
        cancel_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    pipeline = ExtractionPipeline(summarizer=ProductSummarizer())
    try:
        descriptor = pipeline.extract(url, cancel_event=cancel_event)
    except ExtractionError as e:
        print(json.dumps({"error": str(e), "type": e.__class__.__name__}))
        return 1

    print(json.dumps(descriptor.to_dict(), indent=2))
    return 0


def run_discover(since: Optional[str], keywords: List[KeywordEntry], scan_size: Optional[int]) -> int:
    from reddit_agent.clients.reddit_client import RedditClient
    from reddit_agent.discovery import ThreadDiscovery

    client = RedditClient()
    if since is None:
        since = client.fetch_latest_post_id()
        logger.info(f"Starting from latest post id: {since}")

    discovery = ThreadDiscovery(client, scan_size=scan_size)
    result = discovery.run(since, keywords)
    print(json.dumps(result.to_dict(), indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        if args.command == "ids":
            print(json.dumps(generate_id_range(args.start, args.end, args.max_count)))
        elif args.command == "next-ids":
            print(json.dumps(generate_next_id_range(args.last, args.count)))
        elif args.command == "extract":
            return run_extract(args.url)
        elif args.command == "discover":
            return run_discover(args.since, args.keyword, args.scan_size)
    except InvalidCharacterError as e:
        logger.error(str(e))
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
