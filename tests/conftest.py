"""
Pytest Configuration and Shared Fixtures

Provides common fixtures and configuration for all test modules.
"""

import json
import pytest
import pytest_asyncio
from datetime import datetime, timedelta
from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

from src.models import BrandInfo, PageFacts


# ============================================================================
# Mock Data Fixtures
# ============================================================================

@pytest.fixture
def raw_page_facts() -> Dict[str, Any]:
    """Raw page facts as the fetcher returns them (camelCase keys)."""
    return {
        "url": "https://acme.io",
        "title": "Acme - Project Management for Teams",
        "description": (
            "Acme helps distributed teams plan, track and ship projects with "
            "shared roadmaps and automated status reports."
        ),
        "textContent": "Acme project management " * 250,
        "headings": [f"Heading {i}" for i in range(12)],
        "links": (
            [f"https://acme.io/page-{i}" for i in range(12)]
            + [f"https://partner-{i}.com" for i in range(7)]
        ),
        "metaTags": {
            "description": "Acme helps distributed teams plan projects.",
            "og:title": "Acme",
            "og:description": "Project management for teams",
            "viewport": "width=device-width",
        },
        "hasFAQ": True,
        "hasTestimonials": True,
        "hasPricing": True,
        "hasAbout": True,
        "hasBlog": False,
        "hasComparisons": False,
        "hasDocumentation": True,
        "hasUseCases": False,
    }


@pytest.fixture
def rich_facts(raw_page_facts) -> PageFacts:
    """Sanitized facts for a content-rich site."""
    from src.context.sanitizer import sanitize_page_facts
    return sanitize_page_facts(raw_page_facts)


@pytest.fixture
def empty_facts() -> PageFacts:
    """Facts for a page that exposed nothing but its URL."""
    return PageFacts(url="https://example.com")


@pytest.fixture
def brand_info() -> BrandInfo:
    """Brand info for the content-rich site."""
    return BrandInfo(
        name="Acme",
        domain="acme.io",
        industry="project management software",
        description="Project management for distributed teams.",
    )


# ============================================================================
# Mock Client Fixtures
# ============================================================================

@pytest.fixture
def mock_claude():
    """ClaudeClient stand-in; set ``complete.return_value`` per test."""
    client = MagicMock()
    client.complete = AsyncMock(return_value="")
    return client


@pytest.fixture
def claude_returning():
    """Factory for a ClaudeClient stand-in that returns the given payload as JSON."""
    def _create(payload: Any) -> MagicMock:
        client = MagicMock()
        text = payload if isinstance(payload, str) else json.dumps(payload)
        client.complete = AsyncMock(return_value=text)
        return client
    return _create


@pytest.fixture
def mock_fetcher():
    """PageFactsFetcher stand-in returning a bare example.com page."""
    fetcher = MagicMock()
    fetcher.fetch = AsyncMock(return_value={
        "url": "https://example.com",
        "hasFAQ": False,
        "hasComparisons": False,
        "textContent": "",
    })
    fetcher.close = AsyncMock()
    return fetcher


# ============================================================================
# Time
# ============================================================================

class FakeClock:
    """Manually advanced clock for freshness-window tests."""

    def __init__(self, start: datetime = datetime(2024, 6, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


# ============================================================================
# Report Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def fallback_result(mock_fetcher):
    """A full report produced with every generative step on its fallback."""
    from src.analyzer.engine import VisibilityAnalyzer
    analyzer = VisibilityAnalyzer(fetcher=mock_fetcher)
    return await analyzer.analyze("https://example.com")
