"""
Centralized test configuration and fixtures.

No test touches the network: HTTP sessions, praw and OpenAI are replaced
by mocks here or in the individual test modules.
"""

import os
from unittest.mock import MagicMock

import pytest

# Set test environment variables early
os.environ["TESTING"] = "true"
os.environ.setdefault("OPENAI_API_KEY", "test_api_key")

from reddit_agent.models import DescriptorFields  # noqa: E402

ARTICLE_HTML = """<!DOCTYPE html>
<html>
<head>
  <title>Acme Tasks - Task tracking for small teams</title>
  <meta property="og:site_name" content="Acme">
</head>
<body>
  <nav class="menu"><a href="/">Home</a> | <a href="/blog">Blog</a> | <a href="/login">Log in</a></nav>
  <div class="sidebar"><a href="/ads">Sponsored</a></div>
  <article class="content">
    <h1>Acme Tasks</h1>
    <p>Acme Tasks is a task tracking tool built for small teams who are tired of heavyweight project management software.
    It keeps every to-do, deadline and discussion in one shared board that the whole team can see at a glance.</p>
    <p>Boards sync instantly across the web, desktop and mobile apps, so remote teams always see the same priorities.
    Recurring tasks, reminders and lightweight time tracking are included in every plan.</p>
    <p>Freelancers and agencies use Acme Tasks to share progress with clients without giving them access to internal notes.
    See the <a href="/pricing">pricing page</a> for plans starting at five dollars per user per month.</p>
  </article>
  <footer><a href="/privacy">Privacy</a> <a href="/terms">Terms</a></footer>
</body>
</html>
"""

EMPTY_BODY_HTML = """<!DOCTYPE html>
<html><head><title>Nothing here</title></head><body></body></html>
"""

# Declares its charset only in the document, with no publisher name
CAFE_HTML = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>Café Crème</title>
</head>
<body>
  <article>
    <h1>Café Crème</h1>
    <p>Café Crème is a naïve espresso tool that dials in grind size, dose and brew time for home baristas.
    It learns from every shot you pull and suggests the next adjustment before you waste more beans.</p>
    <p>The companion app keeps a journal of roasts, grinders and recipes so you can repeat the cup you liked.
    Baristas in small cafés use it to train new staff on a consistent crème and extraction profile.</p>
  </article>
</body>
</html>
"""


@pytest.fixture
def article_html():
    return ARTICLE_HTML


@pytest.fixture
def empty_body_html():
    return EMPTY_BODY_HTML


def make_response(
    status_code=200,
    body=b"",
    url="https://acme.example/",
    encoding="utf-8",
    content_type="text/html; charset=utf-8",
):
    """Build a mock streamed requests.Response."""
    response = MagicMock()
    response.headers = {"Content-Type": content_type}
    response.ok = 200 <= status_code < 300
    response.status_code = status_code
    response.iter_content.return_value = [body] if body else []
    response.encoding = encoding
    response.url = url
    return response


@pytest.fixture
def mock_session():
    """A requests.Session stand-in that serves ARTICLE_HTML."""
    session = MagicMock()
    session.get.return_value = make_response(body=ARTICLE_HTML.encode("utf-8"))
    return session


class StubSummarizer:
    """Deterministic summarizer that records its calls."""

    def __init__(self, fields=None, error=None):
        self.fields = fields or DescriptorFields(
            name="Acme Tasks",
            description="Task tracking for small teams",
            target_audience="Small teams and freelancers",
        )
        self.error = error
        self.calls = []

    def __call__(self, title, site, text):
        self.calls.append((title, site, text))
        if self.error is not None:
            raise self.error
        return self.fields


@pytest.fixture
def stub_summarizer():
    return StubSummarizer()
