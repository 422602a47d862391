"""
Tests for platform visibility estimation and the live probe.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from src.context.platform_visibility import (
    DEFAULT_SCORES,
    PLATFORM_COLORS,
    PLATFORMS,
    LiveVisibilityProbe,
    PlatformVisibilityEstimator,
    build_platform_scores,
    find_mention,
)
from src.integrations.perplexity import PerplexityClient, PerplexityError, PerplexityResult


def _perplexity(answers):
    client = MagicMock()
    client.query = AsyncMock(side_effect=answers)
    return client


def _scores(visibility):
    return {p.platform: p.score for p in visibility.platform_scores}


class TestFindMention:
    """Tests for whole-word brand matching."""

    def test_case_insensitive_whole_word(self):
        assert find_mention("Top picks: ACME and Asana", "Acme", "acme.io")

    def test_substring_does_not_count(self):
        assert find_mention("Acmeworks is great", "Acme", "acme.io") is None

    def test_domain_matches(self):
        assert find_mention("See acme.io for details", "Unrelated Name", "acme.io")

    def test_domain_dot_is_literal(self):
        assert find_mention("acmexio is different", "Zzz", "acme.io") is None

    @pytest.mark.parametrize("brand, text", [
        ("Yahoo!", "Try Yahoo! for search."),
        ("C++", "Learn c++ first."),
        (".NET", "Built on .NET today"),
    ])
    def test_names_with_punctuation_edges(self, brand, text):
        assert find_mention(text, brand, "")

    def test_punctuation_name_not_inside_word(self):
        assert find_mention("xC++ is not it", "C++", "") is None


class TestLiveVisibilityProbe:
    """Tests for the Perplexity mention probe."""

    @pytest.mark.asyncio
    async def test_unconfigured_probe(self, brand_info):
        result = await LiveVisibilityProbe().measure(brand_info)
        assert result.score == 65
        assert result.measured is False
        assert "not configured" in result.summary

    @pytest.mark.asyncio
    async def test_mention_rate_score(self, brand_info):
        client = _perplexity([
            PerplexityResult(answer="Acme is a popular choice."),
            PerplexityResult(answer="Try Asana or Trello."),
            PerplexityResult(answer="acme.io has good roadmaps."),
            PerplexityResult(answer="Monday.com"),
            PerplexityResult(answer="Nothing relevant."),
        ])
        result = await LiveVisibilityProbe(client, delay_seconds=0).measure(brand_info)

        assert client.query.await_count == 5
        assert result.score == 40
        assert result.measured is True
        assert "2 out of 5" in result.summary
        assert result.tests[0].mentioned
        assert result.tests[0].context.startswith("...")

    @pytest.mark.asyncio
    async def test_failed_queries_count_as_misses(self, brand_info):
        client = _perplexity([
            PerplexityError("API error: 500", status_code=500),
            PerplexityResult(answer="Acme"),
            PerplexityError("timeout"),
            PerplexityResult(answer="Acme again"),
            PerplexityResult(answer="Acme third"),
        ])
        result = await LiveVisibilityProbe(client, delay_seconds=0).measure(brand_info)
        assert result.score == 60
        assert result.tests[0].response.startswith("Error")

    @pytest.mark.asyncio
    async def test_queries_run_in_order_with_fixed_delay(self, brand_info):
        client = _perplexity([PerplexityResult(answer="Acme")] * 5)
        probe = LiveVisibilityProbe(client, delay_seconds=0.75)

        with patch("src.context.platform_visibility.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await probe.measure(brand_info)

        assert sleep.await_count == 4
        assert all(c.args == (0.75,) for c in sleep.await_args_list)
        assert [c.args[0] for c in client.query.await_args_list] == LiveVisibilityProbe.build_queries(
            brand_info.industry
        )

    @pytest.mark.asyncio
    async def test_malformed_answer_counts_as_miss(self, brand_info):
        def handler(request):
            return httpx.Response(200, json={"choices": [{"message": "oops"}]})

        client = PerplexityClient("key")
        client._client = httpx.AsyncClient(
            base_url=PerplexityClient.BASE_URL, transport=httpx.MockTransport(handler)
        )
        result = await LiveVisibilityProbe(client, delay_seconds=0).measure(brand_info)
        await client.close()

        assert result.score == 0
        assert result.measured is True
        assert not any(t.mentioned for t in result.tests)

    def test_queries_use_industry(self):
        queries = LiveVisibilityProbe.build_queries("CRM")
        assert len(queries) == 5
        assert queries[0] == "What are the best CRM tools?"


class TestPlatformVisibilityEstimator:
    """Tests for combined model estimates and probe results."""

    def test_build_platform_scores_order_and_colors(self):
        scores = build_platform_scores({})
        assert [p.platform for p in scores] == PLATFORMS
        assert [p.color for p in scores] == [PLATFORM_COLORS[p] for p in PLATFORMS]
        assert {p.platform: p.score for p in scores} == DEFAULT_SCORES

    @pytest.mark.asyncio
    async def test_no_clients_gives_defaults(self, brand_info, rich_facts):
        visibility = await PlatformVisibilityEstimator().estimate(brand_info, rich_facts)
        assert _scores(visibility) == {"ChatGPT": 65, "Claude": 60, "Gemini": 62, "Perplexity": 65}

    @pytest.mark.asyncio
    async def test_model_scores_are_clamped(self, brand_info, rich_facts, claude_returning):
        client = claude_returning({"platforms": [
            {"platform": "ChatGPT", "score": 500},
            {"platform": "claude", "score": -20},
            {"platform": "Gemini", "score": "71.5"},
            {"platform": "Perplexity", "score": 99},
            {"platform": "Bing", "score": 90},
        ]})
        visibility = await PlatformVisibilityEstimator(client).estimate(brand_info, rich_facts)
        scores = _scores(visibility)

        assert scores["ChatGPT"] == 100
        assert scores["Claude"] == 0
        assert scores["Gemini"] == 72
        # Live platform is never taken from the model
        assert scores["Perplexity"] == 65
        assert set(scores) == set(PLATFORMS)

    @pytest.mark.asyncio
    async def test_invalid_json_uses_defaults(self, brand_info, rich_facts, claude_returning):
        visibility = await PlatformVisibilityEstimator(claude_returning("{oops")).estimate(brand_info, rich_facts)
        assert _scores(visibility)["ChatGPT"] == DEFAULT_SCORES["ChatGPT"]

    @pytest.mark.asyncio
    async def test_probe_score_used_for_live_platform(self, brand_info, rich_facts):
        client = _perplexity([PerplexityResult(answer="Acme")] * 5)
        probe = LiveVisibilityProbe(client, delay_seconds=0)
        visibility = await PlatformVisibilityEstimator(probe=probe).estimate(brand_info, rich_facts)
        assert _scores(visibility)["Perplexity"] == 100
        assert visibility.probe.measured
