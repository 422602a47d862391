"""
Recommendation Generator

Asks the generative model for four brand-specific recommendations and
keeps only the entries that pass full validation; nothing is repaired.
When no entry survives, a deterministic generator builds recommendations
straight from the missing content elements, so the report always carries
at least one.
"""

import logging
from typing import Any, List, Optional, TYPE_CHECKING

from pydantic import ValidationError

from src.models import BrandInfo, Gap, PageFacts, PlatformScore, Recommendation
from src.output.parser import extract_json_object, string_items
from src.scoring.gaps import (
    COMPARISON_PAGES,
    DOCUMENTATION,
    FAQ_SECTION,
    USE_CASES,
    found_elements,
    missing_elements,
)
from src.scoring.helpers import average

if TYPE_CHECKING:
    from src.analyzer.client import ClaudeClient

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 4
REQUIRED_FIELDS = ("title", "description", "priority", "category", "actionItems", "estimatedImpact")
PRIORITIES = ("high", "medium", "low")
CATEGORIES = ("content", "technical", "seo", "competitive")


RECOMMENDATION_PROMPT = """You are an AI visibility expert analyzing {url} - a {industry} company.

BRAND CONTEXT:
- Company: {name}
- Industry: {industry}
- Description: {description}
- Current AI visibility score: {avg_score:.0f}/100

CURRENT STRENGTHS (what they have):
{strengths}

IDENTIFIED GAPS (what's missing):
{gaps}

WEBSITE CONTENT ANALYSIS:
- Meta description: "{meta_description}"
- Has FAQ section: {has_faq}
- Has comparison pages: {has_comparisons}
- Has testimonials: {has_testimonials}
- Has blog/content: {has_blog}
- Has documentation: {has_documentation}
- Has use cases: {has_use_cases}
- Has pricing info: {has_pricing}
- Has about page: {has_about}

PLATFORM PERFORMANCE BREAKDOWN:
{platforms}

YOUR TASK:
Generate 4 specific, actionable recommendations for {name} to improve their AI visibility.

Requirements:
1. Be specific to this company: mention their industry, their gaps, their brand name
2. Prioritize based on actual gaps; never recommend something they already have
3. Consider their maturity: large brands need optimization, small brands need foundational content
4. Make action items concrete, e.g. "Create a comparison page: {name} vs [specific competitor]"

For each recommendation:
1. title: Specific to this brand
2. description: Why THIS company needs THIS (reference their gaps/strengths)
3. priority: "high", "medium", or "low"
4. category: "content", "technical", "seo", or "competitive"
5. actionItems: 3-4 concrete, brand-specific steps
6. estimatedImpact: Realistic score improvement ("+X-Y points")

Return JSON only:
{{
  "recommendations": [...]
}}"""


def _yes_no(value: bool, why: str) -> str:
    return "Yes" if value else f"No ({why})"


def _platform_line(score: PlatformScore) -> str:
    if score.score < 60:
        status = "Needs attention"
    elif score.score < 80:
        status = "Room for improvement"
    else:
        status = "Good"
    return f"- {score.platform}: {score.score}/100 {status}"


def build_recommendation_prompt(
    facts: PageFacts,
    brand: BrandInfo,
    gaps: List[Gap],
    platform_scores: List[PlatformScore],
) -> str:
    found = found_elements(gaps)
    missing = missing_elements(gaps)
    return RECOMMENDATION_PROMPT.format(
        url=facts.url,
        name=brand.name,
        industry=brand.industry,
        description=brand.description or facts.description or "Not available",
        avg_score=average(p.score for p in platform_scores),
        strengths="\n".join(f"- {e}" for e in found) if found else "- Limited content detected",
        gaps="\n".join(f"- {e}" for e in missing) if missing else "- No major gaps detected, focus on optimization",
        meta_description=facts.description or "Missing",
        has_faq=_yes_no(facts.has_faq, "critical for AI question-answering"),
        has_comparisons=_yes_no(facts.has_comparisons, "essential for competitive queries"),
        has_testimonials=_yes_no(facts.has_testimonials, "builds credibility in AI responses"),
        has_blog=_yes_no(facts.has_blog, "needed for topical authority"),
        has_documentation=_yes_no(facts.has_documentation, "critical for technical queries"),
        has_use_cases=_yes_no(facts.has_use_cases, "helps AI understand applications"),
        has_pricing=_yes_no(facts.has_pricing, "users frequently ask about pricing"),
        has_about=_yes_no(facts.has_about, "needed for company context"),
        platforms="\n".join(_platform_line(p) for p in platform_scores),
    )


def validate_recommendation(entry: Any) -> Optional[Recommendation]:
    """
    Validate one model-produced entry.

    Returns None when any required field is missing or empty, an enum value
    is invalid, or actionItems is not a list with at least one string.
    """
    if not isinstance(entry, dict):
        return None
    if any(not entry.get(key) for key in REQUIRED_FIELDS):
        return None

    priority = str(entry["priority"])
    category = str(entry["category"])
    if priority not in PRIORITIES or category not in CATEGORIES:
        return None
    if not isinstance(entry["actionItems"], list):
        return None

    try:
        return Recommendation(
            title=str(entry["title"]),
            description=str(entry["description"]),
            priority=priority,
            category=category,
            action_items=string_items(entry["actionItems"]),
            estimated_impact=str(entry["estimatedImpact"]),
        )
    except ValidationError:
        return None


def fallback_recommendations(missing: List[str], brand: Optional[BrandInfo] = None) -> List[Recommendation]:
    """Gap-driven recommendations; never empty."""
    name = brand.name if brand else "your brand"
    industry = brand.industry if brand else "your industry"
    recommendations: List[Recommendation] = []

    if FAQ_SECTION in missing:
        recommendations.append(Recommendation(
            title=f"Develop AI-Optimized FAQ Targeting {industry} Queries",
            description=(
                f"AI platforms heavily weight FAQ content when answering user questions about {name}. "
                f"Without structured Q&A, you're invisible to question-based searches in ChatGPT, "
                f"Claude, and Perplexity."
            ),
            priority="high",
            category="content",
            action_items=[
                f"Research top 20 questions users ask about {industry} solutions using AnswerThePublic and AlsoAsked",
                "Create dedicated FAQ page with Schema.org FAQPage markup for maximum AI visibility",
                f'Include comparison questions: "How does {name} compare to [competitor]?"',
                "Add conversational answers (150-200 words each) that directly address user intent",
            ],
            estimated_impact="+10-15 points",
        ))

    if COMPARISON_PAGES in missing:
        recommendations.append(Recommendation(
            title=f"Build Competitive Comparison Content for {industry}",
            description=(
                f"Most B2B buyers compare 3-5 options before deciding. Without comparison pages, "
                f'{name} loses out when users ask AI "What are alternatives to [competitor]?" '
                f'or "{name} vs [competitor]".'
            ),
            priority="high",
            category="competitive",
            action_items=[
                f"Identify top 5 competitors in {industry} through Tracxn, Crunchbase, or G2",
                f'Create individual comparison pages: "{name} vs [Competitor]" with honest, feature-based analysis',
                "Include comparison tables with pricing, features, use cases, and ideal customer profiles",
                f'Optimize for queries like "best {industry} tools" and "{name} alternatives"',
            ],
            estimated_impact="+12-18 points",
        ))

    if USE_CASES in missing:
        recommendations.append(Recommendation(
            title=f"Create {industry}-Specific Use Case Library",
            description=(
                f"AI platforms need concrete examples to recommend solutions. Use cases help "
                f"ChatGPT and Claude understand when to recommend {name} for specific problems."
            ),
            priority="high",
            category="content",
            action_items=[
                f"Document 5-7 detailed use cases showing how {name} solves specific {industry} problems",
                f'Include metrics: "Company X increased [metric] by Y% using {name}"',
                "Structure as problem, solution, results for maximum AI clarity",
                "Add industry-specific keywords AI models associate with your solution category",
            ],
            estimated_impact="+8-12 points",
        ))

    if DOCUMENTATION in missing:
        recommendations.append(Recommendation(
            title="Publish Comprehensive Technical Documentation",
            description=(
                f"For technical products, documentation is critical for AI visibility. Without it, "
                f'AI platforms can\'t answer "how to" questions about {name}.'
            ),
            priority="high",
            category="technical",
            action_items=[
                "Create getting-started guide, API reference, and implementation tutorials",
                "Use clear headings (H1-H4) and structured sections for AI crawlers",
                "Include code examples, diagrams, and step-by-step instructions",
                "Implement an OpenAPI spec if you have an API for maximum machine-readability",
            ],
            estimated_impact="+10-14 points",
        ))

    if not recommendations:
        recommendations.append(Recommendation(
            title="Optimize Existing Content for AI Discoverability",
            description=(
                f"{name} has solid foundational content. Focus on optimizing what you have for "
                f"better AI platform rankings and mention rates."
            ),
            priority="medium",
            category="seo",
            action_items=[
                "Add Schema.org markup (Organization, Product, FAQPage) to existing pages",
                f"Expand thin content pages to 800+ words with specific {industry} examples",
                "Create internal linking structure connecting related topics",
                f"Update meta descriptions to directly answer common {industry} questions",
            ],
            estimated_impact="+6-10 points",
        ))
        recommendations.append(Recommendation(
            title=f"Develop Thought Leadership Content in {industry}",
            description=(
                f"Establish {name} as an authority by publishing expert insights AI platforms can "
                f"cite when discussing {industry} trends and best practices."
            ),
            priority="medium",
            category="content",
            action_items=[
                f"Launch blog with weekly posts on {industry} trends, challenges, and solutions",
                "Include original data, case studies, or proprietary research",
                "Guest post on industry publications to build external citations",
                "Repurpose content into multiple formats (guides, videos, infographics)",
            ],
            estimated_impact="+5-8 points",
        ))

    return recommendations[:MAX_RECOMMENDATIONS]


class RecommendationGenerator:
    """Generates validated recommendations, with a gap-driven fallback."""

    def __init__(self, claude_client: Optional["ClaudeClient"] = None):
        self.claude_client = claude_client

    async def generate(
        self,
        facts: PageFacts,
        brand: BrandInfo,
        gaps: List[Gap],
        platform_scores: List[PlatformScore],
    ) -> List[Recommendation]:
        """
        Produce 1-4 recommendations. Never raises.

        Args:
            facts: Sanitized page facts
            brand: Extracted brand info
            gaps: Detected content gaps
            platform_scores: Per-platform visibility scores

        Returns:
            Validated recommendations, model-written when possible
        """
        if self.claude_client:
            raw = await self.claude_client.complete(
                build_recommendation_prompt(facts, brand, gaps, platform_scores),
                json_mode=True,
                temperature=0.8,
            )
            data = extract_json_object(raw)
            entries = data.get("recommendations") if data else None

            if isinstance(entries, list):
                valid = [r for r in (validate_recommendation(e) for e in entries) if r is not None]
                dropped = len(entries) - len(valid)
                if dropped:
                    logger.warning(f"Dropped {dropped} invalid recommendations")
                if valid:
                    return valid[:MAX_RECOMMENDATIONS]

            logger.warning("No valid recommendations from model, using gap-based fallback")

        return fallback_recommendations(missing_elements(gaps), brand)
