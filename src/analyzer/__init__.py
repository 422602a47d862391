"""
Visibility Analyzer - Analysis Engine

Pipeline:
- Page facts -> brand -> competitors + platform visibility
- Deterministic scoring
- Recommendations
- Validated AnalysisResult
"""

from .client import ClaudeClient, Completion
from .engine import VisibilityAnalyzer, create_visibility_analyzer

__all__ = [
    "ClaudeClient",
    "Completion",
    "VisibilityAnalyzer",
    "create_visibility_analyzer",
]
