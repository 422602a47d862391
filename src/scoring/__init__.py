"""
Deterministic Scoring Module

Pure functions over sanitized page facts; no network calls, fully
reproducible.

1. **Dimension Scores** (0-100 each)
   Mention Rate, Context Quality, Sentiment, Prominence, Comparison,
   Recommendation.

2. **GEO Metrics** (0-10 each)
   AIC, CES, MTS and their weighted overall.

3. **Gaps**
   Presence of the eight content elements AI assistants rely on.

4. **Overall Score** (0-100)
   Mean of the platform average and the dimension average.

Example Usage:
    from src.scoring import calculate_dimension_scores, calculate_geo_metrics

    dimensions = calculate_dimension_scores(facts)
    geo = calculate_geo_metrics(facts)
    print(geo.overall)
"""

from .helpers import clamp, clamp_score, round_half_up, average
from .dimensions import (
    calculate_dimension_scores,
    calculate_mention_rate,
    calculate_context_quality,
    calculate_sentiment,
    calculate_prominence,
    calculate_comparison,
    calculate_recommendation,
)
from .geo import calculate_geo_metrics, calculate_aic, calculate_ces, calculate_mts
from .gaps import detect_gaps, missing_elements, found_elements
from .overall import calculate_overall_score

__all__ = [
    "clamp",
    "clamp_score",
    "round_half_up",
    "average",
    "calculate_dimension_scores",
    "calculate_mention_rate",
    "calculate_context_quality",
    "calculate_sentiment",
    "calculate_prominence",
    "calculate_comparison",
    "calculate_recommendation",
    "calculate_geo_metrics",
    "calculate_aic",
    "calculate_ces",
    "calculate_mts",
    "detect_gaps",
    "missing_elements",
    "found_elements",
    "calculate_overall_score",
]
