"""
GEO Metrics Calculator

Generative Engine Optimization score, three 0-10 sub-metrics:

1. **AIC** - Answerability & Intent Coverage (40%)
2. **CES** - Credibility, Evidence & Safety (35%)
3. **MTS** - Machine-Readability & Technical Signals (25%)

Formula:
    GEO_Overall = AIC × 0.40 + CES × 0.35 + MTS × 0.25
"""

import logging
from typing import List

from src.models import GEOMetrics, PageFacts

from .helpers import clamp

logger = logging.getLogger(__name__)

MAX_SUB_SCORE = 10.0


def _finish(score: float) -> float:
    return round(clamp(score, 0.0, MAX_SUB_SCORE), 1)


def _external_links(facts: PageFacts) -> List[str]:
    """Links that do not contain the analyzed URL."""
    return [link for link in facts.links if facts.url not in link]


def _internal_links(facts: PageFacts) -> List[str]:
    return [link for link in facts.links if facts.url in link]


def calculate_aic(facts: PageFacts) -> float:
    """Answerability & Intent Coverage."""
    score = 0.0

    # Content depth (up to 3)
    content_length = len(facts.text_content)
    if content_length > 5000:
        score += 3
    elif content_length > 2000:
        score += 2
    elif content_length > 500:
        score += 1

    # Question answering (2)
    if facts.has_faq:
        score += 2

    # Use case coverage (2)
    if facts.has_use_cases:
        score += 2

    # How-to coverage (1.5)
    if facts.has_documentation:
        score += 1.5

    # Topic structure (up to 1.5)
    heading_count = len(facts.headings)
    if heading_count > 10:
        score += 1.5
    elif heading_count > 5:
        score += 1

    return _finish(score)


def calculate_ces(facts: PageFacts) -> float:
    """Credibility, Evidence & Safety."""
    score = 0.0

    if facts.has_testimonials:
        score += 3

    if facts.has_about:
        score += 2

    if facts.has_blog:
        score += 2

    external_count = len(_external_links(facts))
    if external_count > 10:
        score += 1.5
    elif external_count > 5:
        score += 1

    if len(facts.description) > 100:
        score += 1.5

    return _finish(score)


def calculate_mts(facts: PageFacts) -> float:
    """Machine-Readability & Technical Signals."""
    score = 0.0

    # Meta tag coverage (up to 3)
    meta_count = len(facts.meta_tags)
    if meta_count > 10:
        score += 3
    elif meta_count > 5:
        score += 2
    elif meta_count > 2:
        score += 1

    # Heading hierarchy (up to 3)
    heading_count = len(facts.headings)
    if heading_count > 15:
        score += 3
    elif heading_count > 10:
        score += 2
    elif heading_count > 5:
        score += 1

    # Internal linking (up to 2)
    internal_count = len(_internal_links(facts))
    if internal_count > 20:
        score += 2
    elif internal_count > 10:
        score += 1

    # Clear site structure (up to 2)
    if facts.has_pricing and facts.has_about:
        score += 2
    elif facts.has_pricing or facts.has_about:
        score += 1

    return _finish(score)


def calculate_geo_metrics(facts: PageFacts) -> GEOMetrics:
    """Compute AIC, CES and MTS; ``overall`` is derived by the model."""
    metrics = GEOMetrics(
        aic=calculate_aic(facts),
        ces=calculate_ces(facts),
        mts=calculate_mts(facts),
    )
    logger.info(
        f"GEO metrics: AIC={metrics.aic}, CES={metrics.ces}, "
        f"MTS={metrics.mts}, overall={metrics.overall}"
    )
    return metrics
