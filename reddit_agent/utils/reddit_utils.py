"""
Reddit utility functions for parsing and enumerating Reddit identifiers.
"""

import re
from typing import List

from reddit_agent.config import DEFAULT_ID_RANGE_MAX
from reddit_agent.utils.id_codec import decode, encode

SUBMISSION_KIND = "t3"


def generate_id_range(
    start_id: str, end_id: str, max_count: int = DEFAULT_ID_RANGE_MAX
) -> List[str]:
    """
    Generate the ids between two identifiers, newest first.

    The range covers ordinals in (start, end]: it includes ``end_id``,
    excludes ``start_id`` and is truncated to ``max_count`` entries counted
    from the end.

    Args:
        start_id: Lower bound, excluded
        end_id: Upper bound, included
        max_count: Maximum number of ids to return. Defaults to 100.

    Returns:
        List[str]: Strictly descending ids, empty when end <= start

    Raises:
        InvalidCharacterError: If either bound is not base-36
    """
    start = decode(start_id)
    end = decode(end_id)
    if end <= start or max_count <= 0:
        return []

    limit = min(end - start, max_count)
    return [encode(end - offset) for offset in range(limit)]


def generate_next_id_range(last_id: str, count: int) -> List[str]:
    """
    Generate the ``count`` ids that follow ``last_id``, oldest first.

    Args:
        last_id: Last id already seen, excluded
        count: Number of ids to generate

    Returns:
        List[str]: Strictly ascending ids starting at last_id + 1
    """
    last = decode(last_id)
    return [encode(last + offset) for offset in range(1, max(count, 0) + 1)]


def to_fullname(post_id: str, kind: str = SUBMISSION_KIND) -> str:
    """Prefix an id with its thing kind, e.g. ``abc`` -> ``t3_abc``."""
    return f"{kind}_{post_id.lower()}"


def extract_post_id(input_text: str) -> str:
    """
    Extract Reddit post ID from various input formats.

    Handles:
    - Full Reddit URLs: https://reddit.com/r/subreddit/comments/post_id/...
    - Short Reddit URLs: https://reddit.com/comments/post_id/...
    - redd.it links: https://redd.it/post_id
    - Fullnames: t3_post_id
    - Just the post ID: abc123

    Args:
        input_text: The input text that may contain a Reddit post ID or URL

    Returns:
        str: The extracted post ID (lowercased), or the original input if no pattern matches
    """
    if not input_text:
        return ""

    text = input_text.strip()
    patterns = [
        r"reddit\.com/r/[^/]+/comments/([a-zA-Z0-9]+)",
        r"reddit\.com/comments/([a-zA-Z0-9]+)",
        r"redd\.it/([a-zA-Z0-9]+)",
        r"^t3_([a-zA-Z0-9]+)$",
        r"^([a-zA-Z0-9]+)$",
    ]

    for pattern in patterns:
        match = re.search(pattern, text)
        if match:
            return match.group(1).lower()

    return input_text


def validate_post_id(post_id: str) -> bool:
    """
    Validate that a post ID is a canonical base-36 identifier.

    Args:
        post_id: The post ID to validate

    Returns:
        bool: True if the post ID is non-empty base-36 without leading zeros
    """
    if not post_id:
        return False
    return bool(re.fullmatch(r"0|[1-9a-zA-Z][0-9a-zA-Z]*", post_id))
