"""
Tests for PageFactsFetcher HTML extraction and fetch failures.
"""

import pytest

import httpx

from src.context.page_facts import PageFactsFetcher

PAGE = """
<html>
<head>
  <title>  Acme &amp; Co | Project Management </title>
  <meta name="description" content="Plan work across teams.">
  <meta property="og:title" content="Acme">
  <meta name="robots">
  <script>var faq = "<h1>not a heading</h1>";</script>
  <style>h1 { color: red; }</style>
</head>
<body>
  <h1>Ship <span>faster</span></h1>
  <h2><span>Pricing</span></h2><h2>Customers
  <p>Trusted by 3,000 teams.</p>
  <a href="/pricing">Pricing</a>
  <a href="https://acme.io/pricing">Pricing again</a>
  <a href="#top">Top</a>
  <a href="mailto:hi@acme.io">Mail</a>
  <a>No href</a>
  <noscript>Enable JavaScript</noscript>
</body>
</html>
"""


@pytest.fixture
def facts():
    return PageFactsFetcher().extract("https://acme.io/", PAGE)


class TestExtract:
    """Tests for PageFactsFetcher.extract."""

    def test_title_and_description(self, facts):
        assert facts["title"] == "Acme & Co | Project Management"
        assert facts["description"] == "Plan work across teams."

    def test_meta_tags(self, facts):
        assert facts["metaTags"]["og:title"] == "Acme"
        assert "robots" not in facts["metaTags"]

    def test_nested_and_unclosed_headings(self, facts):
        assert facts["headings"][:2] == ["Ship faster", "Pricing"]
        assert facts["headings"][2].startswith("Customers")
        assert not any("not a heading" in h for h in facts["headings"])

    def test_links_absolute_and_deduplicated(self, facts):
        assert facts["links"] == ["https://acme.io/pricing"]

    def test_text_excludes_scripts_and_styles(self, facts):
        text = facts["textContent"]
        assert "Trusted by 3,000 teams." in text
        assert "var faq" not in text
        assert "color: red" not in text
        assert "Enable JavaScript" not in text

    def test_feature_flags(self, facts):
        assert facts["hasPricing"] is True
        assert facts["hasTestimonials"] is True
        assert facts["hasBlog"] is False

    def test_description_falls_back_to_og(self):
        html = '<meta property="og:description" content="From OG">'
        assert PageFactsFetcher().extract("https://x.dev", html)["description"] == "From OG"


class TestFetch:
    """Tests for PageFactsFetcher.fetch over a mocked transport."""

    @staticmethod
    def _fetcher(handler):
        fetcher = PageFactsFetcher()
        fetcher.client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return fetcher

    @pytest.mark.asyncio
    async def test_fetch_extracts(self):
        fetcher = self._fetcher(lambda request: httpx.Response(200, text=PAGE))
        facts = await fetcher.fetch("https://acme.io/")
        await fetcher.close()
        assert facts["title"].startswith("Acme")

    @pytest.mark.asyncio
    async def test_http_error_yields_url_only(self):
        fetcher = self._fetcher(lambda request: httpx.Response(404))
        assert await fetcher.fetch("https://acme.io/missing") == {"url": "https://acme.io/missing"}
        await fetcher.close()

    @pytest.mark.asyncio
    async def test_network_error_yields_url_only(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        fetcher = self._fetcher(handler)
        assert await fetcher.fetch("https://down.dev") == {"url": "https://down.dev"}
        await fetcher.close()
