from typing import Optional


class RedditAgentError(Exception):
    """Base exception for reddit_agent errors."""
    pass


class InvalidCharacterError(RedditAgentError, ValueError):
    """Exception raised when an identifier contains a non base-36 character."""

    def __init__(self, character: str, value: str):
        self.character = character
        self.value = value
        super().__init__(f"Invalid base36 character: {character!r} in {value!r}")


class ExtractionError(RedditAgentError):
    """Base exception for product extraction errors."""
    pass


class MissingInputError(ExtractionError):
    """Exception raised when no URL was supplied."""

    def __init__(self, message: str = "URL is required"):
        super().__init__(message)


class InvalidUrlFormatError(ExtractionError):
    """Exception raised when the URL cannot be parsed as an absolute URL."""

    def __init__(self, url: str, reason: Optional[str] = None):
        self.url = url
        self.reason = reason
        super().__init__("Invalid URL format")


class FetchError(ExtractionError):
    """Exception raised when the target page could not be retrieved."""

    def __init__(
        self,
        url: str,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
        reason: Optional[str] = None,
    ):
        self.url = url
        self.status_code = status_code
        self.cause = cause
        self.reason = reason
        if status_code is not None:
            detail = str(status_code)
        elif cause is not None:
            detail = str(cause) or cause.__class__.__name__
        elif reason:
            detail = reason
        else:
            detail = "Unknown error"
        super().__init__(f"Failed to fetch URL: {detail}")

    @property
    def is_client_error(self) -> bool:
        """True when the target answered with a 4xx status."""
        return self.status_code is not None and 400 <= self.status_code < 500


class NoExtractableContentError(ExtractionError):
    """Exception raised when a fetched page has no readable body."""

    def __init__(self, url: str):
        self.url = url
        super().__init__("Could not extract content from URL")


class ExtractionCancelledError(ExtractionError):
    """Exception raised when the caller cancelled an in-flight extraction."""
    pass


class SummarizationError(ExtractionError):
    """Exception raised when the summarizer returns an unusable response."""
    pass
