"""
Page Facts Sanitizer

Trust boundary between the page fetcher and the rest of the pipeline.
Whatever arrives (a partial dict, wrong types, None, a list) leaves as a
fully populated PageFacts; downstream code never re-checks types.
"""

import logging
from typing import Any, Dict, List, Mapping

from src.models import PageFacts

logger = logging.getLogger(__name__)


# PageFacts field -> accepted raw keys (fetcher camelCase first)
FIELD_KEYS = {
    "url": ("url",),
    "title": ("title",),
    "description": ("description",),
    "text_content": ("textContent", "text_content"),
    "headings": ("headings",),
    "links": ("links",),
    "meta_tags": ("metaTags", "meta_tags"),
    "has_faq": ("hasFAQ", "hasFaq", "has_faq"),
    "has_testimonials": ("hasTestimonials", "has_testimonials"),
    "has_pricing": ("hasPricing", "has_pricing"),
    "has_about": ("hasAbout", "has_about"),
    "has_blog": ("hasBlog", "has_blog"),
    "has_comparisons": ("hasComparisons", "has_comparisons"),
    "has_documentation": ("hasDocumentation", "has_documentation"),
    "has_use_cases": ("hasUseCases", "has_use_cases"),
}

FLAG_FIELDS = (
    "has_faq",
    "has_testimonials",
    "has_pricing",
    "has_about",
    "has_blog",
    "has_comparisons",
    "has_documentation",
    "has_use_cases",
)


def _lookup(raw: Mapping, field_name: str) -> Any:
    for key in FIELD_KEYS[field_name]:
        if key in raw:
            return raw[key]
    return None


def _string(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) else default


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item if isinstance(item, str) else str(item) for item in value if item is not None]


def _string_map(value: Any) -> Dict[str, str]:
    if not isinstance(value, Mapping):
        return {}
    return {
        str(key): val if isinstance(val, str) else str(val)
        for key, val in value.items()
        if val is not None
    }


def sanitize_page_facts(raw: Any) -> PageFacts:
    """
    Normalize a loosely typed page-facts record.

    Args:
        raw: Anything; usually the dict returned by PageFactsFetcher

    Returns:
        PageFacts with every field present and correctly typed
    """
    if not isinstance(raw, Mapping):
        logger.warning(f"Page facts were {type(raw).__name__}, using defaults")
        raw = {}

    flags = {name: bool(_lookup(raw, name)) for name in FLAG_FIELDS}

    return PageFacts(
        url=_string(_lookup(raw, "url")),
        title=_string(_lookup(raw, "title"), "Untitled"),
        description=_string(_lookup(raw, "description")),
        text_content=_string(_lookup(raw, "text_content")),
        headings=_string_list(_lookup(raw, "headings")),
        links=_string_list(_lookup(raw, "links")),
        meta_tags=_string_map(_lookup(raw, "meta_tags")),
        **flags,
    )
