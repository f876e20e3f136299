"""
Product extraction pipeline for the Reddit Agent application.

Turns a single user-submitted URL into a ProductDescriptor:

1. Validate the input
2. Normalize and parse the URL
3. Fetch the page
4. Parse the DOM and extract the readable article
5. Summarize the article into name / description / target audience
6. Assemble the descriptor with the normalized input URL

Every failure is raised to the caller as an ExtractionError subclass (or
the summarizer's own exception); nothing is retried here.
"""

import threading
import time
from typing import Optional, Tuple

import requests
from bs4.dammit import UnicodeDammit

from reddit_agent import config
from reddit_agent.content_extractor import extract_readable_content
from reddit_agent.exceptions import (
    ExtractionCancelledError,
    FetchError,
    InvalidUrlFormatError,
    MissingInputError,
    NoExtractableContentError,
)
from reddit_agent.models import ExtractedArticle, ProductDescriptor
from reddit_agent.product_summarizer import Summarizer
from reddit_agent.utils.logging_config import get_logger, log_operation
from reddit_agent.utils.url_utils import hostname_of, normalize_url, parse_absolute_url

logger = get_logger(__name__)

CHUNK_SIZE = 64 * 1024


class ExtractionPipeline:
    """
    Fetches a product page and reduces it to a ProductDescriptor.

    The pipeline holds no per-request state, so one instance can serve
    concurrent callers. The summarizer is injected so tests can use a
    deterministic stub.
    """

    def __init__(
        self,
        summarizer: Summarizer,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        max_content_chars: Optional[int] = None,
        max_fetch_bytes: Optional[int] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            summarizer: Callable (title, site, text) -> DescriptorFields
            session: HTTP session used for fetching. Defaults to plain requests.
            timeout: Fetch timeout in seconds. Defaults to FETCH_TIMEOUT_SECONDS.
            user_agent: User-Agent header. Defaults to FETCH_USER_AGENT.
            max_content_chars: Maximum text handed to the summarizer.
            max_fetch_bytes: Largest response body accepted. Defaults to MAX_FETCH_BYTES.
        """
        self.summarizer = summarizer
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else config.FETCH_TIMEOUT_SECONDS
        self.user_agent = user_agent or config.FETCH_USER_AGENT
        self.max_content_chars = (
            max_content_chars
            if max_content_chars is not None
            else config.MAX_CONTENT_CHARS
        )
        self.max_fetch_bytes = (
            max_fetch_bytes if max_fetch_bytes is not None else config.MAX_FETCH_BYTES
        )

    @staticmethod
    def _check_cancelled(cancel_event: Optional[threading.Event], url: str) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise ExtractionCancelledError(f"Extraction of {url} was cancelled")

    def parse_url(self, url) -> str:
        """
        Validate and normalize a submitted URL.

        Raises:
            MissingInputError: If url is not a non-empty string
            InvalidUrlFormatError: If url is not an absolute http(s) URL
        """
        if not isinstance(url, str) or not url.strip():
            raise MissingInputError()

        normalized = normalize_url(url)
        try:
            return parse_absolute_url(normalized)
        except ValueError as e:
            raise InvalidUrlFormatError(url, reason=str(e)) from e

    def fetch(
        self, url: str, cancel_event: Optional[threading.Event] = None
    ) -> Tuple[str, str]:
        """
        Fetch a page.

        Args:
            url: Absolute URL to fetch
            cancel_event: Set by the caller to abandon the download

        Returns:
            Tuple[str, str]: Decoded HTML and the final URL after redirects

        Raises:
            FetchError: On transport failure, timeout, non-2xx status or a body
                larger than max_fetch_bytes
            ExtractionCancelledError: If cancel_event was set mid-download
        """
        self._check_cancelled(cancel_event, url)
        try:
            response = self.session.get(
                url,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
                stream=True,
                allow_redirects=True,
            )
        except requests.RequestException as e:
            raise FetchError(url, cause=e) from e

        try:
            if not response.ok:
                raise FetchError(url, status_code=response.status_code)

            chunks = []
            received = 0
            try:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    self._check_cancelled(cancel_event, url)
                    received += len(chunk)
                    if received > self.max_fetch_bytes:
                        raise FetchError(
                            url,
                            reason=f"Response exceeds {self.max_fetch_bytes} bytes",
                        )
                    chunks.append(chunk)
            except requests.RequestException as e:
                raise FetchError(url, cause=e) from e

            html = self._decode(b"".join(chunks), response)
            return html, response.url or url
        finally:
            response.close()

    @staticmethod
    def _decode(body: bytes, response: requests.Response) -> str:
        """
        Decode a page body.

        A charset in the Content-Type header wins. Otherwise the document's
        own declaration (BOM, <meta charset>) is used before falling back to
        detection; requests' ISO-8859-1 default for bare text/* is ignored.
        """
        if not body:
            return ""
        content_type = response.headers.get("Content-Type", "")
        known = []
        if "charset=" in content_type.lower() and response.encoding:
            known.append(response.encoding)
        dammit = UnicodeDammit(body, known_definite_encodings=known, is_html=True)
        if dammit.unicode_markup is None:
            return body.decode("utf-8", errors="replace")
        return dammit.unicode_markup

    def extract(
        self, url, cancel_event: Optional[threading.Event] = None
    ) -> ProductDescriptor:
        """
        Run the full pipeline for one URL.

        Args:
            url: URL as submitted by the user
            cancel_event: Optional event; when set the pipeline stops at the
                next checkpoint and raises ExtractionCancelledError

        Returns:
            ProductDescriptor: Descriptor whose url is the normalized input

        Raises:
            MissingInputError, InvalidUrlFormatError, FetchError,
            NoExtractableContentError, ExtractionCancelledError: see exceptions
            Exception: Whatever the summarizer raises, unchanged
        """
        start_time = time.time()
        details = {"url": url if isinstance(url, str) else repr(url)}
        log_operation(logger, "extract_product", "started", details)

        try:
            parsed_url = self.parse_url(url)
            details["url"] = parsed_url

            html, final_url = self.fetch(parsed_url, cancel_event)
            if final_url != parsed_url:
                details["final_url"] = final_url

            article = extract_readable_content(html, parsed_url)
            if article is None or not article.text_content.strip():
                raise NoExtractableContentError(parsed_url)

            self._check_cancelled(cancel_event, parsed_url)
            descriptor = self._describe(article, parsed_url)
            self._check_cancelled(cancel_event, parsed_url)
        except Exception as e:
            log_operation(
                logger,
                "extract_product",
                "failure",
                details,
                error=e,
                duration=time.time() - start_time,
            )
            raise

        log_operation(
            logger,
            "extract_product",
            "success",
            {**details, "name": descriptor.name, "site_name": article.site_name},
            duration=time.time() - start_time,
        )
        return descriptor

    def _describe(self, article: ExtractedArticle, url: str) -> ProductDescriptor:
        text = article.text_content.strip()[: self.max_content_chars]
        site = article.site_name or hostname_of(url)
        fields = self.summarizer(article.title, site, text)
        return ProductDescriptor.from_fields(fields, url)
