"""
Tests for recommendation generation and the supplementary report sections.
"""

import pytest

from src.context.platform_visibility import build_platform_scores
from src.models import GEOMetrics
from src.reporter import (
    RecommendationGenerator,
    fallback_recommendations,
    generate_competitor_analysis,
    generate_platform_score_details,
    generate_quick_wins,
    generate_strategic_bets,
    perform_accuracy_checks,
    validate_recommendation,
)
from src.reporter.sections import estimate_accuracy
from src.scoring import detect_gaps


VALID_ENTRY = {
    "title": "Publish an Acme vs Asana page",
    "description": "Buyers compare tools before choosing.",
    "priority": "high",
    "category": "competitive",
    "actionItems": ["Draft the comparison table", "Add FAQ schema"],
    "estimatedImpact": "+8-12 points",
}


class TestValidateRecommendation:
    """Tests for per-entry validation."""

    def test_valid_entry(self):
        rec = validate_recommendation(VALID_ENTRY)
        assert rec is not None
        assert rec.action_items == ["Draft the comparison table", "Add FAQ schema"]

    @pytest.mark.parametrize("change", [
        {"title": ""},
        {"priority": "urgent"},
        {"category": "marketing"},
        {"actionItems": "do things"},
        {"actionItems": []},
        {"actionItems": [1, 2]},
        {"estimatedImpact": None},
    ])
    def test_invalid_entries_dropped(self, change):
        assert validate_recommendation({**VALID_ENTRY, **change}) is None

    def test_non_dict(self):
        assert validate_recommendation(["title"]) is None


class TestFallbackRecommendations:
    """Tests for the gap-driven fallback."""

    def test_faq_and_comparison_first_with_high_priority(self, empty_facts, brand_info):
        missing = [g.element for g in detect_gaps(empty_facts) if not g.found]
        recs = fallback_recommendations(missing, brand_info)

        assert 1 <= len(recs) <= 4
        assert recs[0].title.startswith("Develop AI-Optimized FAQ")
        assert recs[1].title.startswith("Build Competitive Comparison")
        assert recs[0].priority == "high"
        assert recs[1].priority == "high"

    def test_no_gaps_gives_generic_medium(self, brand_info):
        recs = fallback_recommendations([], brand_info)
        assert len(recs) == 2
        assert all(r.priority == "medium" for r in recs)

    def test_without_brand(self):
        recs = fallback_recommendations(["Documentation"])
        assert len(recs) == 1
        assert "your brand" in recs[0].description


class TestRecommendationGenerator:
    """Tests for RecommendationGenerator."""

    @pytest.mark.asyncio
    async def test_model_entries_kept(self, rich_facts, brand_info, claude_returning):
        client = claude_returning({"recommendations": [VALID_ENTRY, {**VALID_ENTRY, "priority": "bad"}]})
        recs = await RecommendationGenerator(client).generate(
            rich_facts, brand_info, detect_gaps(rich_facts), build_platform_scores({})
        )
        assert len(recs) == 1
        assert recs[0].title == VALID_ENTRY["title"]

        _, kwargs = client.complete.await_args
        assert kwargs["temperature"] == 0.8
        assert kwargs["json_mode"] is True

    @pytest.mark.asyncio
    async def test_capped_at_four(self, rich_facts, brand_info, claude_returning):
        client = claude_returning({"recommendations": [VALID_ENTRY] * 7})
        recs = await RecommendationGenerator(client).generate(
            rich_facts, brand_info, detect_gaps(rich_facts), build_platform_scores({})
        )
        assert len(recs) == 4

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        "no json",
        {"recommendations": []},
        {"recommendations": [{"title": "only a title"}]},
        {"other": 1},
    ])
    async def test_zero_valid_entries_falls_back(self, rich_facts, brand_info, claude_returning, payload):
        recs = await RecommendationGenerator(claude_returning(payload)).generate(
            rich_facts, brand_info, detect_gaps(rich_facts), build_platform_scores({})
        )
        assert len(recs) >= 1

    @pytest.mark.asyncio
    async def test_prompt_mentions_gaps(self, rich_facts, brand_info, mock_claude):
        await RecommendationGenerator(mock_claude).generate(
            rich_facts, brand_info, detect_gaps(rich_facts), build_platform_scores({})
        )
        prompt = mock_claude.complete.await_args.args[0]
        assert "- Comparison Pages" in prompt
        assert "Acme" in prompt


class TestSupplementarySections:
    """Tests for the deterministic report sections."""

    def test_accuracy_range(self, empty_facts, rich_facts):
        assert estimate_accuracy(empty_facts) == 80
        # description, about, pricing, documentation, FAQ
        assert estimate_accuracy(rich_facts) == 95

    def test_accuracy_checks_low_signal_page(self, empty_facts, brand_info):
        checks = perform_accuracy_checks(brand_info, empty_facts)
        assert len(checks) == 4
        check = checks[0]
        assert check.overall_accuracy == 80
        assert len(check.hallucinations) == 1
        assert check.missing_info == ["Pricing details", "Recent product updates"]
        assert check.test_queries[0] == "What is Acme?"

    def test_accuracy_checks_rich_page(self, rich_facts, brand_info):
        check = perform_accuracy_checks(brand_info, rich_facts)[0]
        assert check.hallucinations == []
        assert check.missing_info == []

    def test_platform_details_deterministic(self, rich_facts):
        geo = GEOMetrics(aic=8.0, ces=7.5, mts=6.0)
        scores = build_platform_scores({"ChatGPT": 72})
        first = generate_platform_score_details(scores, rich_facts, geo)
        second = generate_platform_score_details(scores, rich_facts, geo)

        assert first == second
        assert first[0].overall_score == 7.2
        assert first[0].aic_score == 8.0

    def test_competitor_analysis_brand_first(self, brand_info, rich_facts):
        from src.context.competitor_discovery import current_brand_entry
        from src.models import Competitor

        competitors = [current_brand_entry(brand_info)] + [
            Competitor(rank=i + 2, name=f"Rival {i}", domain=f"rival{i}.com", score=70,
                       market_overlap=60, strengths=["A", "B", "C"])
            for i in range(7)
        ]
        analysis = generate_competitor_analysis(competitors, brand_info, rich_facts)

        assert len(analysis) == 6
        assert analysis[0].name == "Acme"
        assert analysis[1].key_differentiators == ["A", "B"]
        assert analysis[2].discovery_score == 7.7

    def test_quick_wins_follow_missing_content(self, empty_facts, rich_facts):
        assert len(generate_quick_wins(empty_facts)) == 3
        wins = generate_quick_wins(rich_facts)
        assert [w.title for w in wins] == ["Create Comparison Pages"]

    def test_strategic_bets_fixed(self):
        bets = generate_strategic_bets()
        assert len(bets) == 2
        assert bets[0].timeline == "3-4 months"
