"""
Readable-content extraction for product pages.

Wraps readability-lxml (a port of Mozilla's Readability) behind a single
function so the scoring engine can be swapped without touching the
extraction pipeline. Readability scores candidate blocks by paragraph and
text density, penalises link-heavy blocks and uses class/id hints
("article", "content" versus "sidebar", "comment") to find the main body.
"""

from typing import Optional

from bs4 import BeautifulSoup
from readability import Document
from readability.readability import Unparseable

from reddit_agent.models import ExtractedArticle
from reddit_agent.utils.logging_config import get_logger

logger = get_logger(__name__)

# Any non-whitespace text counts as readable content
MIN_TEXT_LENGTH = 1

_NO_TITLE = "[no-title]"


def _html_to_text(html: str) -> str:
    soup = BeautifulSoup(html, "lxml")
    lines = (line.strip() for line in soup.get_text("\n").splitlines())
    return "\n".join(line for line in lines if line)


def _page_metadata(html: str):
    soup = BeautifulSoup(html, "lxml")

    site_name = None
    meta = soup.find("meta", attrs={"property": "og:site_name"})
    if meta and meta.get("content"):
        site_name = meta["content"].strip() or None

    heading = soup.find("h1")
    heading_text = heading.get_text(" ", strip=True) if heading else None
    return site_name, heading_text or None


def extract_readable_content(html: str, base_url: str) -> Optional[ExtractedArticle]:
    """
    Extract the main article of an HTML document.

    Args:
        html: Raw HTML of the page
        base_url: URL the page was fetched from; relative links in the
            extracted HTML are resolved against it

    Returns:
        Optional[ExtractedArticle]: The article, or None when the page has
            no readable body (empty document, empty body, unparseable markup)
    """
    if not html or not html.strip():
        logger.info(f"Empty document for {base_url}")
        return None

    try:
        document = Document(html, url=base_url)
        summary_html = document.summary(html_partial=True)
        title = document.short_title() or document.title()
    except Unparseable as e:
        logger.info(f"Readability could not parse {base_url}: {e}")
        return None

    text = _html_to_text(summary_html)
    if len(text) < MIN_TEXT_LENGTH:
        logger.info(f"No readable content found at {base_url}")
        return None

    site_name, heading = _page_metadata(html)
    if not title or title == _NO_TITLE:
        title = heading

    logger.info(f"Extracted {len(text)} characters of readable content from {base_url}")
    return ExtractedArticle(
        title=title,
        text_content=text,
        html_content=summary_html,
        site_name=site_name,
    )
