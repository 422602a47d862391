"""
Dimension Score Calculator

Six 0-100 dimension scores derived purely from sanitized page facts.
Each starts from a fixed base and adds fixed increments for the presence
of specific content features:

    Mention Rate     50  +15 description > 50 chars, +10 FAQ, +10 blog,
                         +15 text > 2000 chars
    Context Quality  40  +20 description, +15 headings > 5,
                         +15 documentation, +10 og:description
    Sentiment        70  +15 testimonials, +10 pricing, +5 about
    Prominence       45  +10 title > 10 chars, +15 headings > 8,
                         +20 comparisons, +10 og:title
    Comparison       35  +35 comparisons, +15 FAQ, +15 pricing
    Recommendation   50  +20 testimonials, +15 FAQ, +15 use cases
"""

from typing import List

from src.models import DimensionScore, PageFacts

from .helpers import clamp

FULL_MARK = 100


def calculate_mention_rate(facts: PageFacts) -> int:
    score = 50
    if len(facts.description) > 50:
        score += 15
    if facts.has_faq:
        score += 10
    if facts.has_blog:
        score += 10
    if len(facts.text_content) > 2000:
        score += 15
    return clamp(score, 0, FULL_MARK)


def calculate_context_quality(facts: PageFacts) -> int:
    score = 40
    if facts.description:
        score += 20
    if len(facts.headings) > 5:
        score += 15
    if facts.has_documentation:
        score += 15
    if facts.meta_tags.get("og:description"):
        score += 10
    return clamp(score, 0, FULL_MARK)


def calculate_sentiment(facts: PageFacts) -> int:
    score = 70  # neutral-positive default
    if facts.has_testimonials:
        score += 15
    if facts.has_pricing:
        score += 10
    if facts.has_about:
        score += 5
    return clamp(score, 0, FULL_MARK)


def calculate_prominence(facts: PageFacts) -> int:
    score = 45
    if len(facts.title) > 10:
        score += 10
    if len(facts.headings) > 8:
        score += 15
    if facts.has_comparisons:
        score += 20
    if facts.meta_tags.get("og:title"):
        score += 10
    return clamp(score, 0, FULL_MARK)


def calculate_comparison(facts: PageFacts) -> int:
    score = 35
    if facts.has_comparisons:
        score += 35
    if facts.has_faq:
        score += 15
    if facts.has_pricing:
        score += 15
    return clamp(score, 0, FULL_MARK)


def calculate_recommendation(facts: PageFacts) -> int:
    score = 50
    if facts.has_testimonials:
        score += 20
    if facts.has_faq:
        score += 15
    if facts.has_use_cases:
        score += 15
    return clamp(score, 0, FULL_MARK)


def calculate_dimension_scores(facts: PageFacts) -> List[DimensionScore]:
    """All six dimension scores in display order."""
    return [
        DimensionScore(dimension="Mention Rate", score=calculate_mention_rate(facts)),
        DimensionScore(dimension="Context Quality", score=calculate_context_quality(facts)),
        DimensionScore(dimension="Sentiment", score=calculate_sentiment(facts)),
        DimensionScore(dimension="Prominence", score=calculate_prominence(facts)),
        DimensionScore(dimension="Comparison", score=calculate_comparison(facts)),
        DimensionScore(dimension="Recommendation", score=calculate_recommendation(facts)),
    ]
