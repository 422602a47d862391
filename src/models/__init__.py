"""
Visibility Analyzer - Data Models

Shared data models used across the system.

Page-level inputs (PageFacts, BrandInfo) are plain dataclasses; every
record that ends up in a persisted report is a pydantic model so the
assembled result can be validated as a whole.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from .report import (
    Priority,
    Impact,
    RecommendationCategory,
    PlatformScore,
    DimensionScore,
    GEOMetrics,
    Competitor,
    Gap,
    Recommendation,
    Hallucination,
    AccuracyCheck,
    CompetitorAnalysis,
    PlatformScoreDetail,
    QuickWin,
    StrategicBet,
    ReportBrandInfo,
    AnalysisResult,
)


@dataclass(frozen=True)
class PageFacts:
    """Sanitized signals scraped from a single website."""
    url: str = ""
    title: str = "Untitled"
    description: str = ""
    text_content: str = ""
    headings: List[str] = field(default_factory=list)
    links: List[str] = field(default_factory=list)
    meta_tags: Dict[str, str] = field(default_factory=dict)
    has_faq: bool = False
    has_testimonials: bool = False
    has_pricing: bool = False
    has_about: bool = False
    has_blog: bool = False
    has_comparisons: bool = False
    has_documentation: bool = False
    has_use_cases: bool = False


@dataclass
class BrandInfo:
    """Brand identity inferred from the page."""
    name: str
    domain: str
    industry: str
    description: str


__all__ = [
    "PageFacts",
    "BrandInfo",
    "Priority",
    "Impact",
    "RecommendationCategory",
    "PlatformScore",
    "DimensionScore",
    "GEOMetrics",
    "Competitor",
    "Gap",
    "Recommendation",
    "Hallucination",
    "AccuracyCheck",
    "CompetitorAnalysis",
    "PlatformScoreDetail",
    "QuickWin",
    "StrategicBet",
    "ReportBrandInfo",
    "AnalysisResult",
]
