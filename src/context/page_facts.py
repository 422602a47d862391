"""
Page Facts Fetcher

Fetches a single page and extracts the raw signals the visibility pipeline
works from: title, meta description, meta tags, headings, links, visible
text and keyword-based content-feature flags.

The output is deliberately loose (a plain dict with camelCase keys); the
sanitizer is the trust boundary that turns it into a typed PageFacts.
"""

import logging
import re
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 50000
PARSER = "html.parser"

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
NON_CONTENT_TAGS = ["script", "style", "noscript", "template"]
SKIPPED_LINK_PREFIXES = ("#", "mailto:", "tel:", "javascript:")


# Keyword patterns for content-feature detection (lower-cased HTML)
FEATURE_PATTERNS = {
    "hasFAQ": ["faq", "frequently asked", "questions and answers", '"faqpage"'],
    "hasTestimonials": [
        "testimonial", "what our customers say", "customer stories",
        "reviews", "case stud", "trusted by",
    ],
    "hasPricing": ["/pricing", "pricing", "per month", "/month", "/mo", "plans"],
    "hasAbout": ["/about", "about us", "our story", "our team", "who we are"],
    "hasBlog": ["/blog", "/articles", "/news", "/insights", "/resources"],
    "hasComparisons": [" vs ", " vs. ", "versus", "/compare", "comparison", "alternative to", "/alternatives"],
    "hasDocumentation": ["/docs", "documentation", "/api", "developer guide", "getting started"],
    "hasUseCases": ["use case", "use-case", "/solutions", "customers use", "industries"],
}


class PageFactsFetcher:
    """Fetches a page and extracts raw page facts."""

    def __init__(self, timeout: float = 15.0):
        self.timeout = timeout
        self.client = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers={
                "User-Agent": "Mozilla/5.0 (compatible; VisibilityBot/1.0)",
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": "en-US,en;q=0.9",
            },
        )

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def fetch(self, url: str) -> Dict[str, Any]:
        """
        Fetch ``url`` and return a best-effort raw page-facts dict.

        Network and HTTP errors are logged and yield ``{"url": url}``; the
        sanitizer fills in defaults for everything else.
        """
        html = await self._fetch_html(url)
        if html is None:
            return {"url": url}
        return self.extract(url, html)

    async def _fetch_html(self, url: str) -> Optional[str]:
        try:
            response = await self.client.get(url)
            response.raise_for_status()
            return response.text
        except httpx.HTTPStatusError as e:
            logger.warning(f"HTTP error fetching {url}: {e.response.status_code}")
            return None
        except httpx.RequestError as e:
            logger.warning(f"Request error fetching {url}: {e}")
            return None

    def extract(self, url: str, html: str) -> Dict[str, Any]:
        """Extract page facts from already-fetched HTML."""
        soup = BeautifulSoup(html, PARSER)
        meta_tags = self._extract_meta_tags(soup)
        lowered = html.lower()

        facts: Dict[str, Any] = {
            "url": url,
            "title": self._extract_title(soup),
            "description": meta_tags.get("description") or meta_tags.get("og:description", ""),
            "headings": self._extract_headings(soup),
            "links": self._extract_links(url, soup),
            "metaTags": meta_tags,
            "textContent": self._extract_text(soup)[:MAX_TEXT_LENGTH],
        }

        for flag, patterns in FEATURE_PATTERNS.items():
            facts[flag] = any(p in lowered for p in patterns)

        return facts

    @staticmethod
    def _extract_title(soup: BeautifulSoup) -> str:
        tag = soup.find("title")
        return _clean(tag.get_text(" ")) if tag else ""

    @staticmethod
    def _extract_meta_tags(soup: BeautifulSoup) -> Dict[str, str]:
        """Map meta name/property to content."""
        tags: Dict[str, str] = {}
        for meta in soup.find_all("meta"):
            key = meta.get("name") or meta.get("property")
            content = meta.get("content")
            if key and content is not None:
                tags[key.strip().lower()] = content.strip()
        return tags

    @staticmethod
    def _extract_headings(soup: BeautifulSoup) -> List[str]:
        headings = []
        for tag in soup.find_all(HEADING_TAGS):
            text = _clean(tag.get_text(" "))
            if text:
                headings.append(text)
        return headings

    @staticmethod
    def _extract_links(base_url: str, soup: BeautifulSoup) -> List[str]:
        links = []
        seen = set()
        for anchor in soup.find_all("a", href=True):
            href = anchor["href"].strip()
            if not href or href.startswith(SKIPPED_LINK_PREFIXES):
                continue
            absolute = urljoin(base_url, href)
            if absolute not in seen:
                seen.add(absolute)
                links.append(absolute)
        return links

    @staticmethod
    def _extract_text(soup: BeautifulSoup) -> str:
        """Visible text; decomposes non-content tags, so call it last."""
        for tag in soup.find_all(NON_CONTENT_TAGS):
            tag.decompose()
        return _clean(soup.get_text(" ", strip=True))


def _clean(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()
