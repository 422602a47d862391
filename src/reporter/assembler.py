"""
Result Assembler & Validator

Merges every pipeline output into one AnalysisResult.

Two-phase construction for the brand's own competitor entry: discovery
gives it a placeholder score, the overall score is computed independently,
then the single ``is_current_brand`` entry is patched. The whole object is
then validated; a failure is a broken contract between pipeline steps and
is raised, never repaired.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError

from src.models import (
    AccuracyCheck,
    AnalysisResult,
    BrandInfo,
    Competitor,
    CompetitorAnalysis,
    DimensionScore,
    Gap,
    GEOMetrics,
    PlatformScore,
    PlatformScoreDetail,
    QuickWin,
    Recommendation,
    StrategicBet,
)

logger = logging.getLogger(__name__)


class AnalysisValidationError(Exception):
    """The assembled report violates the report schema."""

    def __init__(self, message: str, details: str = ""):
        super().__init__(message)
        self.details = details


def patch_current_brand_score(competitors: List[Competitor], overall_score: int) -> List[Competitor]:
    """Copy of ``competitors`` with the current brand's score set."""
    return [
        c.model_copy(update={"score": overall_score}) if c.is_current_brand else c
        for c in competitors
    ]


def _dump(items: List[BaseModel]) -> List[Dict[str, Any]]:
    return [item.model_dump(mode="json", by_alias=True) for item in items]


def assemble_result(
    url: str,
    brand: BrandInfo,
    overall_score: int,
    platform_scores: List[PlatformScore],
    dimension_scores: List[DimensionScore],
    competitors: List[Competitor],
    gaps: List[Gap],
    recommendations: List[Recommendation],
    geo_metrics: Optional[GEOMetrics] = None,
    competitor_analysis: Optional[List[CompetitorAnalysis]] = None,
    platform_score_details: Optional[List[PlatformScoreDetail]] = None,
    accuracy_checks: Optional[List[AccuracyCheck]] = None,
    quick_wins: Optional[List[QuickWin]] = None,
    strategic_bets: Optional[List[StrategicBet]] = None,
) -> AnalysisResult:
    """
    Build and validate the final report.

    Raises:
        AnalysisValidationError: if any field, enum, range or ranking
            constraint is violated
    """
    payload = {
        "url": url,
        "brandInfo": {
            "name": brand.name,
            "domain": brand.domain,
            "industry": brand.industry,
            "description": brand.description,
        },
        "overallScore": overall_score,
        "platformScores": _dump(platform_scores),
        "dimensionScores": _dump(dimension_scores),
        "competitors": _dump(patch_current_brand_score(competitors, overall_score)),
        "gaps": _dump(gaps),
        "recommendations": _dump(recommendations),
        "geoMetrics": geo_metrics.model_dump(mode="json", by_alias=True) if geo_metrics else None,
        "competitorAnalysis": _dump(competitor_analysis or []),
        "platformScoreDetails": _dump(platform_score_details or []),
        "accuracyChecks": _dump(accuracy_checks or []),
        "quickWins": _dump(quick_wins or []),
        "strategicBets": _dump(strategic_bets or []),
    }

    try:
        return AnalysisResult.model_validate(payload)
    except ValidationError as e:
        logger.error(f"Analysis result failed validation: {e.error_count()} errors")
        raise AnalysisValidationError("Analysis result failed validation", details=str(e)) from e
