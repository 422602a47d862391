"""
Report Models

Pydantic models for every record that is part of a persisted analysis.
Top-level report fields serialize to camelCase; the supplementary report
sections keep snake_case keys.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS
# =============================================================================


class Priority(str, Enum):
    """Recommendation priority."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Impact(str, Enum):
    """Impact or effort level used by gaps, quick wins and bets."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecommendationCategory(str, Enum):
    """Area a recommendation belongs to."""
    CONTENT = "content"
    TECHNICAL = "technical"
    SEO = "seo"
    COMPETITIVE = "competitive"


DimensionName = Literal[
    "Mention Rate",
    "Context Quality",
    "Sentiment",
    "Prominence",
    "Comparison",
    "Recommendation",
]


class CamelModel(BaseModel):
    """Base for records serialized with camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


# =============================================================================
# CORE REPORT RECORDS
# =============================================================================


class ReportBrandInfo(CamelModel):
    name: str
    domain: str
    industry: Optional[str] = None
    description: Optional[str] = None


class PlatformScore(CamelModel):
    platform: str
    score: int = Field(ge=0, le=100)
    color: str


class DimensionScore(CamelModel):
    dimension: DimensionName
    score: int = Field(ge=0, le=100)
    full_mark: Literal[100] = 100


class GEOMetrics(CamelModel):
    """
    Generative Engine Optimization sub-metrics.

    ``overall`` is derived on every access and serialization, so it can
    never drift from the three sub-scores.
    """
    aic: float = Field(ge=0, le=10)
    ces: float = Field(ge=0, le=10)
    mts: float = Field(ge=0, le=10)

    @computed_field
    @property
    def overall(self) -> float:
        return round(self.aic * 0.40 + self.ces * 0.35 + self.mts * 0.25, 2)


class Competitor(CamelModel):
    rank: int = Field(ge=1)
    name: str = Field(min_length=1)
    domain: str
    score: int = Field(ge=0, le=100)
    market_overlap: int = Field(ge=0, le=100)
    strengths: List[str] = Field(default_factory=list)
    is_current_brand: bool = False
    funding: Optional[float] = None
    employees: Optional[int] = None
    founded: Optional[int] = None
    description: Optional[str] = None


class Gap(CamelModel):
    element: str
    impact: Impact
    found: bool


class Recommendation(CamelModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    priority: Priority
    category: RecommendationCategory
    action_items: List[str] = Field(min_length=1)
    estimated_impact: str = Field(min_length=1)


# =============================================================================
# SUPPLEMENTARY REPORT SECTIONS (snake_case keys)
# =============================================================================


class Hallucination(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    claim: str
    reason: str
    severity: Impact


class AccuracyCheck(BaseModel):
    platform: str
    test_queries: List[str] = Field(default_factory=list)
    overall_accuracy: int = Field(ge=0, le=100)
    hallucinations: List[Hallucination] = Field(default_factory=list)
    missing_info: List[str] = Field(default_factory=list)
    correct_facts: List[str] = Field(default_factory=list)


class CompetitorAnalysis(BaseModel):
    name: str
    url: str
    discovery_score: float = Field(ge=0, le=10)
    comparison_score: float = Field(ge=0, le=10)
    utility_score: float = Field(ge=0, le=10)
    overall_geo_score: float = Field(ge=0, le=10)
    mention_frequency: int = Field(ge=0, le=100)
    citation_rate: int = Field(ge=0, le=100)
    head_to_head_wins: int = Field(ge=0, le=100)
    key_differentiators: List[str] = Field(default_factory=list)


class PlatformScoreDetail(BaseModel):
    platform: str
    aic_score: float = Field(ge=0, le=10)
    ces_score: float = Field(ge=0, le=10)
    mts_score: float = Field(ge=0, le=10)
    overall_score: float = Field(ge=0, le=10)
    analysis: str
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)


class QuickWin(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: str
    description: str
    impact: Impact
    effort: Impact
    owner: str
    expected_outcome: str


class StrategicBet(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: str
    description: str
    impact: Impact
    effort: Impact
    owner: str
    timeline: Optional[str] = None
    expected_outcome: str


# =============================================================================
# AGGREGATE ROOT
# =============================================================================


class AnalysisResult(CamelModel):
    """Complete, validated visibility report for one URL."""
    url: str = Field(min_length=1)
    brand_info: ReportBrandInfo
    overall_score: int = Field(ge=0, le=100)
    platform_scores: List[PlatformScore] = Field(min_length=1)
    dimension_scores: List[DimensionScore] = Field(min_length=1)
    competitors: List[Competitor] = Field(min_length=1)
    gaps: List[Gap] = Field(min_length=1)
    recommendations: List[Recommendation] = Field(min_length=1)
    geo_metrics: Optional[GEOMetrics] = None
    competitor_analysis: List[CompetitorAnalysis] = Field(default_factory=list)
    platform_score_details: List[PlatformScoreDetail] = Field(default_factory=list)
    accuracy_checks: List[AccuracyCheck] = Field(default_factory=list)
    quick_wins: List[QuickWin] = Field(default_factory=list)
    strategic_bets: List[StrategicBet] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_competitor_ranking(self) -> "AnalysisResult":
        ranks = [c.rank for c in self.competitors]
        if ranks != list(range(1, len(self.competitors) + 1)):
            raise ValueError(f"competitor ranks must be contiguous from 1, got {ranks}")

        current = [c for c in self.competitors if c.is_current_brand]
        if len(current) != 1:
            raise ValueError(
                f"exactly one competitor must be the current brand, found {len(current)}"
            )
        return self

    @model_validator(mode="after")
    def check_unique_dimensions(self) -> "AnalysisResult":
        names = [d.dimension for d in self.dimension_scores]
        if len(names) != len(set(names)):
            raise ValueError(f"duplicate dimension scores: {names}")
        return self

    @property
    def current_brand(self) -> Competitor:
        return next(c for c in self.competitors if c.is_current_brand)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
