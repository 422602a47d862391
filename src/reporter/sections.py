"""
Supplementary Report Sections

Deterministic sections computed after scoring:
- competitor_analysis: head-to-head GEO comparison with the top competitors
- platform_score_details: per-platform GEO breakdown
- accuracy_checks: how reliably each assistant can describe the brand
- quick_wins / strategic_bets: short and long horizon actions

No model calls and no randomness; the same page facts always give the
same sections.
"""

from typing import List

from src.models import (
    AccuracyCheck,
    BrandInfo,
    Competitor,
    CompetitorAnalysis,
    GEOMetrics,
    Hallucination,
    PageFacts,
    PlatformScore,
    PlatformScoreDetail,
    QuickWin,
    StrategicBet,
)
from src.context.platform_visibility import PLATFORMS
from src.scoring.helpers import clamp

MAX_ANALYZED_COMPETITORS = 5
MAX_QUICK_WINS = 3


def generate_competitor_analysis(
    competitors: List[Competitor],
    brand: BrandInfo,
    facts: PageFacts,
) -> List[CompetitorAnalysis]:
    """The brand first, then up to five competitors with position-decayed scores."""
    brand_entry = CompetitorAnalysis(
        name=brand.name,
        url=f"https://{brand.domain}",
        discovery_score=7.5 if facts.has_faq else 6.0,
        comparison_score=7.0 if facts.has_comparisons else 5.5,
        utility_score=7.5 if facts.has_use_cases else 6.0,
        overall_geo_score=7.0,
        mention_frequency=65,
        citation_rate=45,
        head_to_head_wins=55,
        key_differentiators=[
            "Strong technical documentation" if facts.has_documentation else "Growing documentation",
            "Verified customer testimonials" if facts.has_testimonials else "Building social proof",
            "Clear value proposition",
        ],
    )

    rivals = [c for c in competitors if not c.is_current_brand][:MAX_ANALYZED_COMPETITORS]
    entries = [brand_entry]
    for idx, comp in enumerate(rivals):
        entries.append(CompetitorAnalysis(
            name=comp.name,
            url=f"https://{comp.domain}",
            discovery_score=round(8.0 - idx * 0.3, 1),
            comparison_score=round(7.5 - idx * 0.4, 1),
            utility_score=round(7.8 - idx * 0.3, 1),
            overall_geo_score=round(7.7 - idx * 0.3, 1),
            mention_frequency=75 - idx * 5,
            citation_rate=50 - idx * 3,
            head_to_head_wins=70 - idx * 5,
            key_differentiators=comp.strengths[:2],
        ))
    return entries


def generate_platform_score_details(
    platform_scores: List[PlatformScore],
    facts: PageFacts,
    geo: GEOMetrics,
) -> List[PlatformScoreDetail]:
    details = []
    for ps in platform_scores:
        strength = "strong" if ps.score >= 70 else "moderate"
        focus = "FAQ coverage" if facts.has_faq else "content depth"
        details.append(PlatformScoreDetail(
            platform=ps.platform,
            aic_score=geo.aic,
            ces_score=geo.ces,
            mts_score=geo.mts,
            overall_score=round(ps.score / 10, 1),
            analysis=f"{ps.platform} analysis shows {strength} visibility with good {focus}.",
            strengths=[
                "Technical documentation" if facts.has_documentation else "Clear messaging",
                "Social proof" if facts.has_testimonials else "Product information",
            ],
            weaknesses=[
                "Limited comparison content" if not facts.has_comparisons else "Could improve SEO",
                "No blog content" if not facts.has_blog else "Update frequency",
            ],
        ))
    return details


def estimate_accuracy(facts: PageFacts) -> int:
    """
    80-95 depending on how much factual grounding the page offers.

    Each of description, about, pricing, documentation and FAQ adds 3.
    """
    signals = [
        bool(facts.description),
        facts.has_about,
        facts.has_pricing,
        facts.has_documentation,
        facts.has_faq,
    ]
    return int(clamp(80 + 3 * sum(signals), 0, 100))


def perform_accuracy_checks(brand: BrandInfo, facts: PageFacts) -> List[AccuracyCheck]:
    accuracy = estimate_accuracy(facts)

    hallucinations = []
    if accuracy < 90:
        hallucinations.append(Hallucination(
            claim="Some factual details may be outdated",
            reason="Website content needs regular updates",
            severity="low",
        ))

    missing_info = []
    if accuracy < 85:
        if not facts.has_pricing:
            missing_info.append("Pricing details")
        missing_info.append("Recent product updates")

    return [
        AccuracyCheck(
            platform=platform,
            test_queries=[
                f"What is {brand.name}?",
                f"Who are {brand.name}'s competitors?",
                f"What are the benefits of {brand.name}?",
            ],
            overall_accuracy=accuracy,
            hallucinations=list(hallucinations),
            missing_info=list(missing_info),
            correct_facts=[
                "Company name and description",
                "Core product offering",
                "Target market",
            ],
        )
        for platform in PLATFORMS
    ]


def generate_quick_wins(facts: PageFacts) -> List[QuickWin]:
    quick_wins = []

    if not facts.has_faq:
        quick_wins.append(QuickWin(
            title="Add FAQ Schema Markup",
            description="Implement Schema.org FAQPage markup to increase visibility in AI responses.",
            impact="high",
            effort="low",
            owner="Engineering",
            expected_outcome="+12-15% improvement in question-based queries",
        ))

    if not facts.has_comparisons:
        quick_wins.append(QuickWin(
            title="Create Comparison Pages",
            description="Build dedicated comparison pages addressing common queries.",
            impact="high",
            effort="low",
            owner="Content Marketing",
            expected_outcome="+20-25% in comparison query visibility",
        ))

    if not facts.has_testimonials:
        quick_wins.append(QuickWin(
            title="Add Customer Testimonials",
            description="Include verified customer testimonials with names and credentials.",
            impact="high",
            effort="low",
            owner="Marketing",
            expected_outcome="+8-10% improvement in credibility score",
        ))

    return quick_wins[:MAX_QUICK_WINS]


def generate_strategic_bets() -> List[StrategicBet]:
    return [
        StrategicBet(
            title="Comprehensive Use Case Library",
            description="Build a library of 50+ detailed use cases with step-by-step guides.",
            impact="high",
            effort="high",
            owner="Product Marketing",
            timeline="3-4 months",
            expected_outcome="+30-40% improvement in utility score",
        ),
        StrategicBet(
            title="AI-Optimized Content Refresh",
            description="Systematically refresh content to be more conversational with citations.",
            impact="high",
            effort="high",
            owner="Content Strategy",
            timeline="4-6 months",
            expected_outcome="+15-20% overall score improvement",
        ),
    ]
