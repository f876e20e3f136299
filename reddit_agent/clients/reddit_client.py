from typing import List, Optional

import praw

from reddit_agent import config
from reddit_agent.models import RedditPost
from reddit_agent.utils.logging_config import get_logger, log_operation
from reddit_agent.utils.reddit_utils import SUBMISSION_KIND, to_fullname

logger = get_logger(__name__)


class RedditClient:
    """Read-only client for Reddit's bulk info and listing endpoints."""

    def __init__(self, reddit: Optional[praw.Reddit] = None):
        """
        Initialize the client.

        Args:
            reddit: Preconfigured praw instance. When omitted one is built
                from REDDIT_CLIENT_ID, REDDIT_CLIENT_SECRET and REDDIT_USER_AGENT.
        """
        try:
            log_operation(logger, "init", "started", {"user_agent": config.REDDIT_USER_AGENT})

            if reddit is None:
                if not all([config.REDDIT_CLIENT_ID, config.REDDIT_CLIENT_SECRET]):
                    log_operation(
                        logger,
                        "init",
                        "warning",
                        {
                            "message": "Reddit API credentials are missing. Requests will fail until they are set."
                        },
                    )
                reddit = praw.Reddit(
                    client_id=config.REDDIT_CLIENT_ID,
                    client_secret=config.REDDIT_CLIENT_SECRET,
                    user_agent=config.REDDIT_USER_AGENT,
                )
                reddit.read_only = True
            self.reddit = reddit

            log_operation(logger, "init", "success")

        except Exception as e:
            log_operation(logger, "init", "failure", error=e)
            raise

    @staticmethod
    def _to_post(submission) -> RedditPost:
        return RedditPost(
            id=submission.id,
            title=submission.title or "",
            selftext=submission.selftext or "",
            subreddit=submission.subreddit.display_name,
            permalink=submission.permalink,
            created_utc=float(submission.created_utc),
        )

    def batch_fetch_posts(self, post_ids: List[str]) -> List[RedditPost]:
        """
        Fetch a batch of submissions by id in one api/info call.

        Ids that do not exist, were removed or belong to another thing kind
        are simply absent from the result.

        Args:
            post_ids: Base-36 post ids, at most REDDIT_INFO_BATCH_SIZE of them

        Returns:
            List[RedditPost]: The submissions Reddit returned

        Raises:
            ValueError: If more ids than one batch allows are supplied
            prawcore.exceptions.PrawcoreException: If the API call fails
        """
        if not post_ids:
            return []
        if len(post_ids) > config.REDDIT_INFO_BATCH_SIZE:
            raise ValueError(
                f"At most {config.REDDIT_INFO_BATCH_SIZE} ids per batch, got {len(post_ids)}"
            )

        details = {"count": len(post_ids), "first_id": post_ids[0], "last_id": post_ids[-1]}
        try:
            log_operation(logger, "batch_fetch_posts", "started", details)

            fullnames = [to_fullname(post_id) for post_id in post_ids]
            posts = [
                self._to_post(thing)
                for thing in self.reddit.info(fullnames=fullnames)
                if getattr(thing, "fullname", "").startswith(f"{SUBMISSION_KIND}_")
            ]

            log_operation(
                logger, "batch_fetch_posts", "success", {**details, "returned": len(posts)}
            )
            return posts

        except Exception as e:
            log_operation(logger, "batch_fetch_posts", "failure", details, error=e)
            raise

    def fetch_latest_post_id(self) -> Optional[str]:
        """
        Get the id of the newest submission on r/all.

        Returns:
            Optional[str]: The newest post id, or None if the request fails
        """
        try:
            log_operation(logger, "fetch_latest_post_id", "started")

            newest = next(iter(self.reddit.subreddit("all").new(limit=1)), None)
            post_id = newest.id if newest is not None else None

            log_operation(logger, "fetch_latest_post_id", "success", {"post_id": post_id})
            return post_id

        except Exception as e:
            log_operation(logger, "fetch_latest_post_id", "failure", error=e)
            # The discovery pass falls back to its stored cursor
            return None
