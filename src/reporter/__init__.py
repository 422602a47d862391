"""
Visibility Analyzer - Report Generation

Turns scored pipeline outputs into the final report:
- Recommendation generation (model-written, gap-driven fallback)
- Supplementary sections (competitor analysis, accuracy, quick wins)
- Assembly and schema validation of the AnalysisResult
"""

from .recommendations import (
    RecommendationGenerator,
    fallback_recommendations,
    validate_recommendation,
)
from .sections import (
    generate_competitor_analysis,
    generate_platform_score_details,
    perform_accuracy_checks,
    generate_quick_wins,
    generate_strategic_bets,
)
from .assembler import AnalysisValidationError, assemble_result, patch_current_brand_score

__all__ = [
    "RecommendationGenerator",
    "fallback_recommendations",
    "validate_recommendation",
    "generate_competitor_analysis",
    "generate_platform_score_details",
    "perform_accuracy_checks",
    "generate_quick_wins",
    "generate_strategic_bets",
    "AnalysisValidationError",
    "assemble_result",
    "patch_current_brand_score",
]
