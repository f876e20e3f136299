"""
Thread discovery for the Reddit Agent application.

A discovery pass walks Reddit's id space forward from the last post seen,
bulk-fetches the new submissions and reports the ones that mention a
monitored keyword. Persisting matches and the cursor is left to the caller.
"""

import time
from typing import Iterable, List, Optional, Set, Tuple

from prawcore.exceptions import PrawcoreException

from reddit_agent import config
from reddit_agent.clients.reddit_client import RedditClient
from reddit_agent.keyword_matcher import build_matcher
from reddit_agent.models import DiscoveryResult, KeywordEntry, RedditPost, ThreadMatch
from reddit_agent.utils.id_codec import decode
from reddit_agent.utils.logging_config import get_logger, log_operation, log_timing
from reddit_agent.utils.reddit_utils import generate_next_id_range

logger = get_logger(__name__)

BODY_PREVIEW_CHARS = 200


class ThreadDiscovery:
    """
    Runs discovery passes against Reddit.

    The class supports:
    - Forward id enumeration from a stored cursor
    - Batched bulk fetching within Reddit's api/info limit
    - Keyword matching across all monitored products at once
    - Skipping stale posts and already-known threads
    """

    def __init__(
        self,
        reddit_client: RedditClient,
        scan_size: Optional[int] = None,
        batch_size: Optional[int] = None,
        max_age_days: Optional[int] = None,
    ):
        self.reddit_client = reddit_client
        self.scan_size = scan_size if scan_size is not None else config.DISCOVERY_SCAN_SIZE
        self.batch_size = batch_size if batch_size is not None else config.REDDIT_INFO_BATCH_SIZE
        self.max_age_days = (
            max_age_days if max_age_days is not None else config.DISCOVERY_MAX_AGE_DAYS
        )

    @log_timing(logger, "discovery_fetch")
    def fetch_posts(self, post_ids: List[str]) -> Tuple[List[RedditPost], int]:
        """
        Fetch posts in batches.

        A failed batch is logged and skipped so one bad call does not lose
        the rest of the pass.

        Returns:
            Tuple[List[RedditPost], int]: Posts fetched and number of failed batches
        """
        posts: List[RedditPost] = []
        failed_batches = 0
        for start in range(0, len(post_ids), self.batch_size):
            chunk = post_ids[start : start + self.batch_size]
            try:
                posts.extend(self.reddit_client.batch_fetch_posts(chunk))
            except PrawcoreException as e:
                failed_batches += 1
                log_operation(
                    logger,
                    "fetch_posts",
                    "failure",
                    {"first_id": chunk[0], "last_id": chunk[-1]},
                    error=e,
                )
        return posts, failed_batches

    def run(
        self,
        last_post_id: Optional[str],
        keywords: Iterable[KeywordEntry],
        existing_pairs: Optional[Set[Tuple[str, str]]] = None,
        now: Optional[float] = None,
    ) -> DiscoveryResult:
        """
        Run one discovery pass.

        Args:
            last_post_id: Cursor from the previous pass. Defaults to DEFAULT_START_POST_ID.
            keywords: Keywords of every monitored product
            existing_pairs: (product_id, post_id) pairs already recorded
            now: Current unix time, for tests

        Returns:
            DiscoveryResult: New matches and the cursor for the next pass
        """
        start_time = time.time()
        last_post_id = last_post_id or config.DEFAULT_START_POST_ID
        keywords = list(keywords)
        existing = set(existing_pairs or ())
        now = now if now is not None else time.time()

        log_operation(
            logger,
            "discovery",
            "started",
            {"last_post_id": last_post_id, "keywords": len(keywords)},
        )

        if not keywords:
            log_operation(logger, "discovery", "skipped", {"reason": "no keywords configured"})
            return DiscoveryResult(highest_id=last_post_id)

        matcher = build_matcher(keywords)
        post_ids = generate_next_id_range(last_post_id, self.scan_size)
        posts, failed_batches = self.fetch_posts(post_ids)

        if not posts:
            log_operation(
                logger,
                "discovery",
                "warning",
                {"message": "Got 0 posts from Reddit API - possible IP blocking or rate limiting"},
            )

        cutoff = now - self.max_age_days * 24 * 60 * 60
        highest_id = last_post_id
        highest = decode(last_post_id)
        matches: List[ThreadMatch] = []

        for post in posts:
            ordinal = decode(post.id)
            if ordinal > highest:
                highest, highest_id = ordinal, post.id

            if post.created_utc < cutoff:
                continue

            for entry in matcher.match(f"{post.title} {post.selftext}"):
                key = (entry.product_id, post.id)
                if key in existing:
                    continue
                existing.add(key)
                matches.append(
                    ThreadMatch(
                        product_id=entry.product_id,
                        reddit_thread_id=post.id,
                        title=post.title,
                        body_preview=post.selftext[:BODY_PREVIEW_CHARS],
                        subreddit=post.subreddit,
                        url=post.url,
                        created_utc=post.created_utc,
                        matched_keyword=entry.keyword,
                    )
                )

        result = DiscoveryResult(
            highest_id=highest_id,
            matches=matches,
            posts_processed=len(posts),
            ids_requested=len(post_ids),
            failed_batches=failed_batches,
        )
        log_operation(
            logger,
            "discovery",
            "success",
            {
                "posts_processed": result.posts_processed,
                "new_threads": len(matches),
                "last_post_id": highest_id,
                "failed_batches": failed_batches,
            },
            duration=time.time() - start_time,
        )
        return result
