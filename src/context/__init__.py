"""
Context Intelligence Package

Everything the pipeline learns about the analyzed site before scoring:
- Page facts fetching and sanitization
- Brand extraction
- Competitor discovery and ranking
- Platform visibility (live probe + model estimates)

Usage:
    from src.context import PageFactsFetcher, sanitize_page_facts, extract_brand_info

    async with PageFactsFetcher() as fetcher:
        facts = sanitize_page_facts(await fetcher.fetch("https://example.com"))

    brand = await extract_brand_info(facts, claude_client)
"""

from .page_facts import PageFactsFetcher
from .sanitizer import sanitize_page_facts
from .brand_extractor import (
    BrandExtractor,
    extract_brand_info,
    domain_from_url,
    heuristic_brand_info,
)
from .competitor_discovery import (
    CompetitorDiscovery,
    discover_competitors,
    current_brand_entry,
)
from .platform_visibility import (
    PlatformVisibilityEstimator,
    PlatformVisibility,
    LiveVisibilityProbe,
    ProbeResult,
    ProbeTest,
    find_mention,
    PLATFORMS,
    PLATFORM_COLORS,
    DEFAULT_SCORES,
)

__all__ = [
    "PageFactsFetcher",
    "sanitize_page_facts",
    "BrandExtractor",
    "extract_brand_info",
    "domain_from_url",
    "heuristic_brand_info",
    "CompetitorDiscovery",
    "discover_competitors",
    "current_brand_entry",
    "PlatformVisibilityEstimator",
    "PlatformVisibility",
    "LiveVisibilityProbe",
    "ProbeResult",
    "ProbeTest",
    "find_mention",
    "PLATFORMS",
    "PLATFORM_COLORS",
    "DEFAULT_SCORES",
]
