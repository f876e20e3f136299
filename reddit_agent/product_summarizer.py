"""
Product summarization for the Reddit Agent application.

This module turns the readable text of a product page into the three
descriptor fields (name, description, target audience) using OpenAI's
chat completion API in JSON mode.

The extraction pipeline only depends on the ``Summarizer`` call signature,
so tests and alternative backends can substitute any callable.
"""

import json
from typing import Callable, Optional

from openai import OpenAI

from reddit_agent import config
from reddit_agent.exceptions import SummarizationError
from reddit_agent.models import DescriptorFields
from reddit_agent.utils.logging_config import get_logger, log_operation

logger = get_logger(__name__)

# (title, site, text) -> fields
Summarizer = Callable[[Optional[str], str, str], DescriptorFields]

SUMMARY_PROMPT = """Extract product information from this webpage content. If any field cannot be determined, make a reasonable inference based on the available content.

Respond with a JSON object with exactly these keys:
- "name": the product or service name
- "description": a concise description of what the product does
- "targetAudience": who the product is for and what problems it solves

{content}"""


class ProductSummarizer:
    """
    Derives a product descriptor from page text using OpenAI's GPT models.

    Instances are callables matching the ``Summarizer`` signature.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[OpenAI] = None,
    ):
        """
        Initialize the ProductSummarizer.

        Args:
            api_key (str, optional): OpenAI API key. Defaults to OPENAI_API_KEY.
            model (str, optional): Chat model. Defaults to OPENAI_SUMMARY_MODEL.
            client (OpenAI, optional): Preconfigured client, mainly for tests.
        """
        self.model = model or config.OPENAI_SUMMARY_MODEL
        self.client = client or OpenAI(api_key=api_key or config.OPENAI_API_KEY)
        logger.info(f"Initializing ProductSummarizer with model {self.model}")

    def _build_content(self, title: Optional[str], site: str, text: str) -> str:
        lines = [f"Title: {title or 'Unknown'}"]
        lines.append(f"Site: {site}")
        lines.append("Content:")
        lines.append(text)
        return "\n".join(lines).strip()

    def _make_openai_call(self, prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            response_format={"type": "json_object"},
        )
        return response.choices[0].message.content or ""

    def _parse_response(self, content: str) -> DescriptorFields:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise SummarizationError(f"Summary is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise SummarizationError("Summary is not a JSON object")

        missing = [
            key
            for key in ("name", "description", "targetAudience")
            if not isinstance(data.get(key), str)
        ]
        if missing:
            raise SummarizationError(f"Summary is missing fields: {', '.join(missing)}")

        return DescriptorFields(
            name=data["name"].strip(),
            description=data["description"].strip(),
            target_audience=data["targetAudience"].strip(),
        )

    def summarize(self, title: Optional[str], site: str, text: str) -> DescriptorFields:
        """
        Summarize page text into descriptor fields.

        Args:
            title: Page title, if known
            site: Publisher name, or the page's hostname
            text: Readable text of the page

        Returns:
            DescriptorFields: name, description and target audience

        Raises:
            SummarizationError: If the model response is unusable
            openai.OpenAIError: If the API call fails
        """
        details = {"title": title, "site": site, "text_length": len(text), "model": self.model}
        log_operation(logger, "summarize_product", "started", details)
        try:
            prompt = SUMMARY_PROMPT.format(
                content=self._build_content(title, site, text)
            )
            fields = self._parse_response(self._make_openai_call(prompt))
        except Exception as e:
            log_operation(logger, "summarize_product", "failure", details, error=e)
            raise

        log_operation(
            logger, "summarize_product", "success", {**details, "name": fields.name}
        )
        return fields

    def __call__(self, title: Optional[str], site: str, text: str) -> DescriptorFields:
        return self.summarize(title, site, text)
