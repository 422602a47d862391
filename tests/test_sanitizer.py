"""
Tests for page facts sanitization and extraction.
"""

import pytest
from unittest.mock import AsyncMock

import httpx

from src.context.page_facts import PageFactsFetcher
from src.context.sanitizer import sanitize_page_facts
from src.models import PageFacts


SAMPLE_HTML = """
<html>
<head>
  <title>Acme &amp; Co | Project Management</title>
  <meta name="description" content="Plan and ship projects faster.">
  <meta property="og:title" content="Acme">
  <script>var faq = "ignored in text";</script>
</head>
<body>
  <h1>Plan better</h1>
  <h2>Frequently Asked Questions</h2>
  <h3>Acme vs Trello</h3>
  <a href="/pricing">Pricing</a>
  <a href="https://twitter.com/acme">Twitter</a>
  <a href="#top">Top</a>
  <a href="mailto:hi@acme.io">Mail</a>
  <p>What our customers say about us.</p>
</body>
</html>
"""


def _assert_well_typed(facts: PageFacts):
    assert isinstance(facts.url, str)
    assert isinstance(facts.title, str)
    assert isinstance(facts.description, str)
    assert isinstance(facts.text_content, str)
    assert all(isinstance(h, str) for h in facts.headings)
    assert all(isinstance(l, str) for l in facts.links)
    assert all(isinstance(k, str) and isinstance(v, str) for k, v in facts.meta_tags.items())
    for flag in (
        facts.has_faq, facts.has_testimonials, facts.has_pricing, facts.has_about,
        facts.has_blog, facts.has_comparisons, facts.has_documentation, facts.has_use_cases,
    ):
        assert isinstance(flag, bool)


class TestSanitizer:
    """Tests for sanitize_page_facts."""

    @pytest.mark.parametrize("raw", [
        None,
        {},
        [],
        "not a dict",
        42,
        {"title": None, "headings": "nope", "links": None, "metaTags": ["a"]},
        {"headings": [1, None, "H"], "metaTags": {"x": 1, "y": None}, "hasFAQ": "yes"},
    ])
    def test_garbage_is_fully_typed(self, raw):
        _assert_well_typed(sanitize_page_facts(raw))

    def test_defaults(self):
        facts = sanitize_page_facts({})
        assert facts.url == ""
        assert facts.title == "Untitled"
        assert facts.headings == []
        assert facts.meta_tags == {}
        assert facts.has_faq is False

    def test_camel_case_keys(self, raw_page_facts):
        facts = sanitize_page_facts(raw_page_facts)
        assert facts.url == "https://acme.io"
        assert facts.has_faq is True
        assert facts.has_blog is False
        assert facts.meta_tags["og:title"] == "Acme"
        assert len(facts.text_content) == 6000

    def test_snake_case_keys(self):
        facts = sanitize_page_facts({"text_content": "hello", "has_use_cases": True})
        assert facts.text_content == "hello"
        assert facts.has_use_cases is True

    def test_non_string_items_are_stringified(self):
        facts = sanitize_page_facts({"headings": [1, None, "H"], "metaTags": {"x": 1, "y": None}})
        assert facts.headings == ["1", "H"]
        assert facts.meta_tags == {"x": "1"}

    def test_wrong_type_title_falls_back(self):
        assert sanitize_page_facts({"title": 123}).title == "Untitled"


class TestPageFactsExtraction:
    """Tests for PageFactsFetcher.extract."""

    @pytest.fixture
    def fetcher(self):
        return PageFactsFetcher(timeout=1.0)

    def test_extracts_core_fields(self, fetcher):
        raw = fetcher.extract("https://acme.io", SAMPLE_HTML)
        assert raw["title"] == "Acme & Co | Project Management"
        assert raw["description"] == "Plan and ship projects faster."
        assert raw["metaTags"]["og:title"] == "Acme"
        assert raw["headings"] == ["Plan better", "Frequently Asked Questions", "Acme vs Trello"]

    def test_links_resolved_and_filtered(self, fetcher):
        raw = fetcher.extract("https://acme.io", SAMPLE_HTML)
        assert raw["links"] == ["https://acme.io/pricing", "https://twitter.com/acme"]

    def test_script_text_removed(self, fetcher):
        raw = fetcher.extract("https://acme.io", SAMPLE_HTML)
        assert "ignored in text" not in raw["textContent"]
        assert "What our customers say" in raw["textContent"]

    def test_feature_flags(self, fetcher):
        raw = fetcher.extract("https://acme.io", SAMPLE_HTML)
        assert raw["hasFAQ"] is True
        assert raw["hasPricing"] is True
        assert raw["hasComparisons"] is True
        assert raw["hasTestimonials"] is True
        assert raw["hasDocumentation"] is False

    @pytest.mark.asyncio
    async def test_fetch_error_returns_url_only(self, fetcher):
        fetcher.client.get = AsyncMock(side_effect=httpx.ConnectError("refused"))
        raw = await fetcher.fetch("https://down.example")
        assert raw == {"url": "https://down.example"}

        facts = sanitize_page_facts(raw)
        assert facts.url == "https://down.example"
        assert facts.title == "Untitled"
        await fetcher.close()
