"""
Clients package for the Reddit Agent application.
"""

from .reddit_client import RedditClient

__all__ = ["RedditClient"]
