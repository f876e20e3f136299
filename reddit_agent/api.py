import hmac
import logging
from functools import lru_cache
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from reddit_agent import config
from reddit_agent.exceptions import (
    ExtractionCancelledError,
    ExtractionError,
    FetchError,
    InvalidUrlFormatError,
    MissingInputError,
    NoExtractableContentError,
)
from reddit_agent.extraction_pipeline import ExtractionPipeline
from reddit_agent.models import ExtractRequest, ProductDescriptorSchema
from reddit_agent.product_summarizer import ProductSummarizer
from reddit_agent.utils.logging_config import setup_logging

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

# Client closed request
STATUS_CANCELLED = 499

app = FastAPI(title="Reddit Agent")

bearer_scheme = HTTPBearer(auto_error=False)


def require_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """
    Reject requests without a valid bearer token.

    Stands in for the session check of the surrounding application; it runs
    before the pipeline is built so unauthenticated calls never reach the
    network.
    """
    expected = config.API_AUTH_TOKEN
    if (
        not expected
        or credentials is None
        or not hmac.compare_digest(credentials.credentials, expected)
    ):
        raise HTTPException(status_code=401, detail="Unauthorized")
    return "api-user"


@lru_cache(maxsize=1)
def _default_pipeline() -> ExtractionPipeline:
    return ExtractionPipeline(summarizer=ProductSummarizer())


def provide_pipeline() -> ExtractionPipeline:
    return _default_pipeline()


def get_pipeline(
    user: str = Depends(require_user),
    pipeline: ExtractionPipeline = Depends(provide_pipeline),
) -> ExtractionPipeline:
    return pipeline


@app.get("/api/health")
async def health():
    return {"status": "ok"}


@app.post("/api/extract", response_model=ProductDescriptorSchema)
def extract_product(
    request: ExtractRequest,
    pipeline: ExtractionPipeline = Depends(get_pipeline),
):
    """Extract a product descriptor from the submitted URL."""
    try:
        descriptor = pipeline.extract(request.url)
    except (
        MissingInputError,
        InvalidUrlFormatError,
        FetchError,
        NoExtractableContentError,
    ) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ExtractionCancelledError as e:
        raise HTTPException(status_code=STATUS_CANCELLED, detail=str(e))
    except ExtractionError as e:
        raise HTTPException(
            status_code=500, detail=f"Failed to extract product info: {e}"
        )
    except Exception as e:
        logger.error(f"Summarizer failed for {request.url!r}: {e}")
        raise HTTPException(
            status_code=500, detail=f"Failed to extract product info: {e}"
        )

    return ProductDescriptorSchema.from_descriptor(descriptor)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
