import json
import logging
import threading
from unittest.mock import MagicMock

import pytest
import requests

from conftest import CAFE_HTML, EMPTY_BODY_HTML, StubSummarizer, make_response
from reddit_agent.exceptions import (
    ExtractionCancelledError,
    FetchError,
    InvalidUrlFormatError,
    MissingInputError,
    NoExtractableContentError,
)
from reddit_agent.extraction_pipeline import ExtractionPipeline
from reddit_agent.models import ProductDescriptor


@pytest.fixture
def pipeline(stub_summarizer, mock_session):
    return ExtractionPipeline(
        summarizer=stub_summarizer,
        session=mock_session,
        timeout=5,
        user_agent="TestAgent/1.0",
    )


class TestValidation:
    @pytest.mark.parametrize("url", [None, "", "   ", 123, ["https://example.com"]])
    def test_missing_input(self, pipeline, mock_session, url):
        with pytest.raises(MissingInputError) as exc_info:
            pipeline.extract(url)
        assert str(exc_info.value) == "URL is required"
        mock_session.get.assert_not_called()

    @pytest.mark.parametrize("url", ["not-a-url", "ftp://example.com", "https://"])
    def test_invalid_url_format(self, pipeline, mock_session, url):
        with pytest.raises(InvalidUrlFormatError) as exc_info:
            pipeline.extract(url)
        assert str(exc_info.value) == "Invalid URL format"
        mock_session.get.assert_not_called()


class TestFetch:
    def test_request_parameters(self, pipeline, mock_session):
        pipeline.extract("acme.example/product")
        args, kwargs = mock_session.get.call_args
        assert args[0] == "https://acme.example/product"
        assert kwargs["headers"] == {"User-Agent": "TestAgent/1.0"}
        assert kwargs["timeout"] == 5
        assert kwargs["stream"] is True

    def test_non_success_status(self, pipeline, mock_session, stub_summarizer):
        response = make_response(status_code=404)
        mock_session.get.return_value = response
        with pytest.raises(FetchError) as exc_info:
            pipeline.extract("https://acme.example/missing")
        assert exc_info.value.status_code == 404
        assert exc_info.value.is_client_error
        assert str(exc_info.value) == "Failed to fetch URL: 404"
        response.close.assert_called_once()
        assert stub_summarizer.calls == []

    def test_server_error_is_not_client_error(self, pipeline, mock_session):
        mock_session.get.return_value = make_response(status_code=503)
        with pytest.raises(FetchError) as exc_info:
            pipeline.extract("https://acme.example/")
        assert not exc_info.value.is_client_error

    def test_timeout(self, pipeline, mock_session):
        mock_session.get.side_effect = requests.Timeout("read timed out")
        with pytest.raises(FetchError) as exc_info:
            pipeline.extract("https://acme.example/")
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.cause, requests.Timeout)
        assert "read timed out" in str(exc_info.value)

    def test_oversized_body(self, stub_summarizer, mock_session):
        pipeline = ExtractionPipeline(
            summarizer=stub_summarizer, session=mock_session, max_fetch_bytes=1024
        )
        response = make_response()
        response.iter_content.return_value = [b"x" * 600, b"x" * 600, b"x" * 600]
        mock_session.get.return_value = response
        with pytest.raises(FetchError) as exc_info:
            pipeline.extract("https://acme.example/")
        assert str(exc_info.value) == "Failed to fetch URL: Response exceeds 1024 bytes"
        assert exc_info.value.status_code is None
        response.close.assert_called_once()
        assert stub_summarizer.calls == []

    def test_connection_reset_mid_body(self, pipeline, mock_session):
        response = make_response()
        response.iter_content.side_effect = requests.ConnectionError("reset by peer")
        mock_session.get.return_value = response
        with pytest.raises(FetchError):
            pipeline.extract("https://acme.example/")
        response.close.assert_called_once()


class TestExtract:
    def test_returns_descriptor(self, pipeline, stub_summarizer):
        descriptor = pipeline.extract("https://acme.example/product")
        assert isinstance(descriptor, ProductDescriptor)
        assert descriptor.name == "Acme Tasks"
        assert descriptor.description == "Task tracking for small teams"
        assert descriptor.target_audience == "Small teams and freelancers"
        assert descriptor.url == "https://acme.example/product"

    def test_url_is_normalized_input(self, pipeline):
        descriptor = pipeline.extract("  acme.example  ")
        assert descriptor.url == "https://acme.example/"

    def test_url_ignores_redirect(self, pipeline, mock_session, article_html):
        mock_session.get.return_value = make_response(
            body=article_html.encode("utf-8"), url="https://www.acme.example/landing"
        )
        descriptor = pipeline.extract("https://acme.example/product")
        assert descriptor.url == "https://acme.example/product"

    def test_summarizer_receives_article(self, pipeline, stub_summarizer):
        pipeline.extract("https://acme.example/product")
        assert len(stub_summarizer.calls) == 1
        title, site, text = stub_summarizer.calls[0]
        assert "Task tracking" in title
        assert site == "Acme"
        assert "task tracking tool built for small teams" in text

    def test_site_falls_back_to_hostname(self, pipeline, mock_session, stub_summarizer):
        mock_session.get.return_value = make_response(body=CAFE_HTML.encode("utf-8"))
        pipeline.extract("https://Cafe-Creme.example/app")
        _, site, _ = stub_summarizer.calls[0]
        assert site == "cafe-creme.example"

    def test_text_truncated(self, stub_summarizer, mock_session):
        pipeline = ExtractionPipeline(
            summarizer=stub_summarizer, session=mock_session, max_content_chars=50
        )
        pipeline.extract("https://acme.example/product")
        _, _, text = stub_summarizer.calls[0]
        assert len(text) == 50

    def test_empty_body(self, pipeline, mock_session, stub_summarizer):
        mock_session.get.return_value = make_response(body=EMPTY_BODY_HTML.encode("utf-8"))
        with pytest.raises(NoExtractableContentError) as exc_info:
            pipeline.extract("https://acme.example/")
        assert str(exc_info.value) == "Could not extract content from URL"
        assert stub_summarizer.calls == []

    def test_empty_document(self, pipeline, mock_session, stub_summarizer):
        mock_session.get.return_value = make_response(body=b"")
        with pytest.raises(NoExtractableContentError):
            pipeline.extract("https://acme.example/")
        assert stub_summarizer.calls == []

    def test_summarizer_failure_propagates(self, mock_session):
        summarizer = StubSummarizer(error=RuntimeError("model unavailable"))
        pipeline = ExtractionPipeline(summarizer=summarizer, session=mock_session)
        with pytest.raises(RuntimeError, match="model unavailable"):
            pipeline.extract("https://acme.example/")

    def test_success_logged(self, pipeline, caplog):
        with caplog.at_level(logging.INFO):
            pipeline.extract("https://acme.example/product")
        entries = [
            json.loads(r.getMessage())
            for r in caplog.records
            if '"operation": "extract_product"' in r.getMessage()
        ]
        statuses = [entry["status"] for entry in entries]
        assert statuses == ["started", "success"]
        assert entries[-1]["details"]["name"] == "Acme Tasks"
        assert entries[-1]["details"]["site_name"] == "Acme"

    def test_failure_logged(self, pipeline, caplog):
        with caplog.at_level(logging.INFO):
            with pytest.raises(InvalidUrlFormatError):
                pipeline.extract("not-a-url")
        failures = [
            json.loads(r.getMessage())
            for r in caplog.records
            if r.levelname == "ERROR" and "extract_product" in r.getMessage()
        ]
        assert failures[0]["error"]["type"] == "InvalidUrlFormatError"


class TestDecoding:
    def test_meta_charset_used_without_header_charset(self, pipeline, mock_session, stub_summarizer):
        # requests reports ISO-8859-1 for a bare text/html content type
        mock_session.get.return_value = make_response(
            body=CAFE_HTML.encode("utf-8"),
            url="https://cafe.example/",
            encoding="ISO-8859-1",
            content_type="text/html",
        )
        pipeline.extract("https://cafe.example/")
        title, _, text = stub_summarizer.calls[0]
        assert "Café Crème" in text
        assert "naïve" in text
        assert "Ã" not in text
        assert "Café" in title

    def test_header_charset_wins(self, pipeline, mock_session, stub_summarizer):
        body = CAFE_HTML.replace('<meta charset="utf-8">', "").encode("iso-8859-1")
        mock_session.get.return_value = make_response(
            body=body,
            encoding="ISO-8859-1",
            content_type="text/html; charset=ISO-8859-1",
        )
        pipeline.extract("https://cafe.example/")
        _, _, text = stub_summarizer.calls[0]
        assert "Café Crème" in text


class TestCancellation:
    def test_cancelled_before_fetch(self, pipeline, mock_session):
        event = threading.Event()
        event.set()
        with pytest.raises(ExtractionCancelledError):
            pipeline.extract("https://acme.example/", cancel_event=event)
        mock_session.get.assert_not_called()

    def test_cancelled_during_download(self, pipeline, mock_session, stub_summarizer):
        event = threading.Event()

        def chunks(chunk_size):
            yield b"<html><body>"
            event.set()
            yield b"<p>more</p></body></html>"

        response = make_response()
        response.iter_content.side_effect = chunks
        mock_session.get.return_value = response

        with pytest.raises(ExtractionCancelledError) as exc_info:
            pipeline.extract("https://acme.example/", cancel_event=event)
        assert not isinstance(exc_info.value, FetchError)
        response.close.assert_called_once()
        assert stub_summarizer.calls == []

    def test_cancelled_during_summarization(self, mock_session):
        event = threading.Event()

        class CancellingSummarizer(StubSummarizer):
            def __call__(self, title, site, text):
                event.set()
                return super().__call__(title, site, text)

        pipeline = ExtractionPipeline(summarizer=CancellingSummarizer(), session=mock_session)
        with pytest.raises(ExtractionCancelledError):
            pipeline.extract("https://acme.example/", cancel_event=event)


def test_default_session_is_requests_session(stub_summarizer):
    pipeline = ExtractionPipeline(summarizer=stub_summarizer)
    assert isinstance(pipeline.session, requests.Session)


def test_parse_url_passes_through_valid_urls(pipeline):
    assert pipeline.parse_url("//acme.example/a") == "https://acme.example/a"
