import os

from dotenv import load_dotenv

load_dotenv()

# OpenAI Configuration
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_SUMMARY_MODEL = os.getenv("OPENAI_SUMMARY_MODEL", "gpt-4o-mini")

# Page fetching for product extraction
FETCH_TIMEOUT_SECONDS = float(os.getenv("FETCH_TIMEOUT_SECONDS", "15"))
FETCH_USER_AGENT = os.getenv(
    "FETCH_USER_AGENT",
    "Mozilla/5.0 (compatible; RedditAgent/1.0; +https://reddit-agent.app)",
)
# Upper bound on the article text handed to the summarizer
MAX_CONTENT_CHARS = int(os.getenv("MAX_CONTENT_CHARS", "8000"))
# Product pages larger than this are refused
MAX_FETCH_BYTES = int(os.getenv("MAX_FETCH_BYTES", str(5 * 1024 * 1024)))

# Reddit id enumeration
DEFAULT_ID_RANGE_MAX = 100
# api/info accepts at most 100 fullnames per call
REDDIT_INFO_BATCH_SIZE = 100
DISCOVERY_SCAN_SIZE = int(os.getenv("DISCOVERY_SCAN_SIZE", "2000"))
DISCOVERY_MAX_AGE_DAYS = int(os.getenv("DISCOVERY_MAX_AGE_DAYS", "30"))
DEFAULT_START_POST_ID = os.getenv("DEFAULT_START_POST_ID", "1i5abc")

# Reddit API credentials (read-only access is enough for api/info)
REDDIT_CLIENT_ID = os.getenv("REDDIT_CLIENT_ID")
REDDIT_CLIENT_SECRET = os.getenv("REDDIT_CLIENT_SECRET")
REDDIT_USER_AGENT = os.getenv("REDDIT_USER_AGENT", "RedditAgent/1.0")

# Shared bearer token accepted by the HTTP entry point
API_AUTH_TOKEN = os.getenv("API_AUTH_TOKEN")
