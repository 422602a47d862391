"""
Brand Extractor

Infers brand name, domain, industry and description from sanitized page
facts with a single generative call. The model's answer is untrusted:
unparsable output falls back as a whole, partial output falls back field
by field. The domain is always derived from the URL, never from the model.
"""

import logging
import re
from typing import Optional, TYPE_CHECKING
from urllib.parse import urlparse

from src.models import BrandInfo, PageFacts
from src.output.parser import as_text, extract_json_object

if TYPE_CHECKING:
    from src.analyzer.client import ClaudeClient

logger = logging.getLogger(__name__)

UNKNOWN_COMPANY = "Unknown Company"
UNKNOWN_DOMAIN = "unknown.com"
UNKNOWN_INDUSTRY = "Unknown"
NO_DESCRIPTION = "No description available"

CONTENT_SAMPLE_CHARS = 1000


BRAND_PROMPT = """Analyze this website and extract brand information:

Title: {title}
Description: {description}
Content sample: {content_sample}

Extract:
1. Brand name (company name)
2. Industry/sector
3. Brief description (1-2 sentences about what they do)

Return JSON format:
{{
  "name": "Brand Name",
  "domain": "domain.com",
  "industry": "industry",
  "description": "brief description"
}}"""


def domain_from_url(url: str) -> str:
    """
    Derive a bare host name from a URL.

    Strategies, in order: URL parsing, regex strip of protocol and path,
    then the literal "unknown.com".
    """
    if not url:
        return UNKNOWN_DOMAIN

    try:
        hostname = urlparse(url).hostname
    except ValueError:
        hostname = None
    if hostname:
        return hostname

    stripped = re.sub(r'^https?://', '', url, flags=re.IGNORECASE).split('/')[0]
    return stripped or UNKNOWN_DOMAIN


def fallback_name(facts: PageFacts) -> str:
    return facts.title[:50] if facts.title else UNKNOWN_COMPANY


def fallback_description(facts: PageFacts) -> str:
    return facts.description or NO_DESCRIPTION


def heuristic_brand_info(facts: PageFacts) -> BrandInfo:
    """BrandInfo built purely from the page, no model involved."""
    return BrandInfo(
        name=fallback_name(facts),
        domain=domain_from_url(facts.url),
        industry=UNKNOWN_INDUSTRY,
        description=fallback_description(facts),
    )


class BrandExtractor:
    """Extracts BrandInfo from page facts."""

    def __init__(self, claude_client: Optional["ClaudeClient"] = None):
        self.claude_client = claude_client

    async def extract(self, facts: PageFacts) -> BrandInfo:
        """
        Extract brand info. Never raises.

        Args:
            facts: Sanitized page facts

        Returns:
            Fully populated BrandInfo
        """
        if not self.claude_client:
            logger.info("No generative client configured, deriving brand info from page")
            return heuristic_brand_info(facts)

        prompt = BRAND_PROMPT.format(
            title=facts.title,
            description=facts.description,
            content_sample=facts.text_content[:CONTENT_SAMPLE_CHARS],
        )
        raw = await self.claude_client.complete(prompt, json_mode=True)
        data = extract_json_object(raw)

        if data is None:
            logger.warning("Failed to parse brand info JSON, using page-derived fallback")
            return heuristic_brand_info(facts)

        return BrandInfo(
            name=as_text(data.get("name")) or fallback_name(facts),
            domain=domain_from_url(facts.url),
            industry=as_text(data.get("industry")) or UNKNOWN_INDUSTRY,
            description=as_text(data.get("description")) or fallback_description(facts),
        )


async def extract_brand_info(
    facts: PageFacts,
    claude_client: Optional["ClaudeClient"] = None,
) -> BrandInfo:
    """Convenience wrapper around BrandExtractor."""
    return await BrandExtractor(claude_client).extract(facts)
