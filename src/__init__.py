"""
AI Visibility Analyzer

Estimates how visible a brand is inside AI assistants:
1. Scrapes the brand's website into page facts
2. Extracts brand info, discovers competitors, probes Perplexity live
3. Scores dimensions, GEO metrics and content gaps deterministically
4. Generates recommendations with Claude and validates the full report
"""

__version__ = "0.1.0"
