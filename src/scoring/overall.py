"""
Overall Visibility Score

    Overall = round((avg(platform scores) + avg(dimension scores)) / 2)

The two averages are computed independently, so adding a platform never
changes the weight of the dimension side.
"""

from typing import List

from src.models import DimensionScore, PlatformScore

from .helpers import average, clamp_score


def calculate_overall_score(
    platform_scores: List[PlatformScore],
    dimension_scores: List[DimensionScore],
) -> int:
    platform_avg = average(p.score for p in platform_scores)
    dimension_avg = average(d.score for d in dimension_scores)
    return clamp_score((platform_avg + dimension_avg) / 2)
