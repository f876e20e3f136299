"""
Data models for the Reddit Agent application.

This module defines the core data structures used throughout the application:
extracted articles and product descriptors produced by the extraction
pipeline, Reddit posts returned by the bulk fetcher, and the keyword
matches produced by a discovery pass. Request and response schemas for
the HTTP entry point are pydantic models.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass
class ExtractedArticle:
    """
    Main readable content of a web page.

    Attributes:
        title (Optional[str]): Article title, if one could be determined
        text_content (str): Plain text of the article body
        html_content (str): Serialized HTML of the article body
        site_name (Optional[str]): Publisher name from og:site_name, if present
    """

    title: Optional[str]
    text_content: str
    html_content: str
    site_name: Optional[str] = None


@dataclass
class DescriptorFields:
    """The three fields a summarizer derives from an article."""

    name: str
    description: str
    target_audience: str


@dataclass
class ProductDescriptor:
    """
    Structured description of a product page.

    Attributes:
        name (str): The product or service name
        description (str): A concise description of what the product does
        target_audience (str): Who the product is for and what problems it solves
        url (str): Normalized absolute URL the caller submitted
    """

    name: str
    description: str
    target_audience: str
    url: str

    @classmethod
    def from_fields(cls, fields: DescriptorFields, url: str) -> "ProductDescriptor":
        return cls(
            name=fields.name,
            description=fields.description,
            target_audience=fields.target_audience,
            url=url,
        )

    def to_dict(self) -> Dict[str, str]:
        """Convert to the wire representation used by API clients."""
        return {
            "name": self.name,
            "description": self.description,
            "targetAudience": self.target_audience,
            "url": self.url,
        }


@dataclass
class RedditPost:
    """
    A submission returned by Reddit's bulk info endpoint.

    Attributes:
        id (str): Base-36 post id, without the t3_ prefix
        title (str): Post title
        selftext (str): Post body, empty for link posts
        subreddit (str): Subreddit display name
        permalink (str): Path of the post on reddit.com
        created_utc (float): Creation time as a unix timestamp
    """

    id: str
    title: str
    selftext: str
    subreddit: str
    permalink: str
    created_utc: float

    @property
    def url(self) -> str:
        return f"https://reddit.com{self.permalink}"

    @property
    def created_at(self) -> datetime:
        return datetime.fromtimestamp(self.created_utc, tz=timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class KeywordEntry:
    """A keyword a product is monitoring."""

    keyword: str
    product_id: str


@dataclass
class ThreadMatch:
    """
    A Reddit thread that matched one of a product's keywords.

    Attributes:
        product_id (str): Product whose keyword matched
        reddit_thread_id (str): Base-36 post id
        title (str): Post title
        body_preview (str): First 200 characters of the post body
        subreddit (str): Subreddit display name
        url (str): Absolute URL of the thread
        created_utc (float): Post creation time
        matched_keyword (str): Keyword as configured by the product
    """

    product_id: str
    reddit_thread_id: str
    title: str
    body_preview: str
    subreddit: str
    url: str
    created_utc: float
    matched_keyword: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class DiscoveryResult:
    """Outcome of one discovery pass."""

    highest_id: str
    matches: List[ThreadMatch] = field(default_factory=list)
    posts_processed: int = 0
    ids_requested: int = 0
    failed_batches: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "highest_id": self.highest_id,
            "posts_processed": self.posts_processed,
            "ids_requested": self.ids_requested,
            "failed_batches": self.failed_batches,
            "matches": [match.to_dict() for match in self.matches],
        }


# Pydantic schemas for the HTTP entry point
class ExtractRequest(BaseModel):
    """Request body for product extraction."""

    # Left untyped so a non-string url is reported as missing input rather than a 422
    url: Any = Field(None, description="Product page URL")


class ProductDescriptorSchema(BaseModel):
    name: str
    description: str
    target_audience: str = Field(..., alias="targetAudience")
    url: str

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_descriptor(cls, descriptor: ProductDescriptor) -> "ProductDescriptorSchema":
        return cls(**descriptor.to_dict())
