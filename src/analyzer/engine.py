"""
Visibility Analysis Engine

Orchestrates the pipeline that turns a URL into a validated report:

1. Fetch page facts and sanitize them
2. Extract brand info
3. Discover competitors and estimate platform visibility (in parallel)
4. Deterministic scoring: dimensions, gaps, GEO metrics, overall score
5. Generate recommendations
6. Build supplementary sections
7. Assemble and validate the AnalysisResult

Every step except the final validation absorbs its own failures and
returns a fallback of the same shape.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Optional, TYPE_CHECKING

from .client import ClaudeClient

from ..context.brand_extractor import BrandExtractor
from ..context.competitor_discovery import CompetitorDiscovery
from ..context.page_facts import PageFactsFetcher
from ..context.platform_visibility import LiveVisibilityProbe, PlatformVisibilityEstimator
from ..context.sanitizer import sanitize_page_facts
from ..models import AnalysisResult
from ..reporter import (
    RecommendationGenerator,
    assemble_result,
    generate_competitor_analysis,
    generate_platform_score_details,
    generate_quick_wins,
    generate_strategic_bets,
    perform_accuracy_checks,
)
from ..scoring import (
    calculate_dimension_scores,
    calculate_geo_metrics,
    calculate_overall_score,
    detect_gaps,
)

if TYPE_CHECKING:
    from ..integrations.config import ExternalAPIClients
    from ..integrations.tracxn import TracxnClient
    from ..utils.config import Settings

logger = logging.getLogger(__name__)


class VisibilityAnalyzer:
    """
    AI visibility analysis pipeline.

    All collaborators are optional; a missing client makes the matching
    step use its deterministic fallback.

    Usage:
        analyzer = create_visibility_analyzer()
        result = await analyzer.analyze("https://example.com")
        print(result.overall_score)
    """

    def __init__(
        self,
        claude_client: Optional[ClaudeClient] = None,
        fetcher: Optional[PageFactsFetcher] = None,
        tracxn_client: Optional["TracxnClient"] = None,
        probe: Optional[LiveVisibilityProbe] = None,
        clients: Optional["ExternalAPIClients"] = None,
    ):
        self.claude_client = claude_client
        self.fetcher = fetcher
        self.clients = clients
        self.brand_extractor = BrandExtractor(claude_client)
        self.competitor_discovery = CompetitorDiscovery(claude_client, tracxn_client)
        self.visibility_estimator = PlatformVisibilityEstimator(claude_client, probe)
        self.recommendation_generator = RecommendationGenerator(claude_client)

    async def analyze(self, url: str) -> AnalysisResult:
        """
        Run the full pipeline for ``url``.

        Raises:
            AnalysisValidationError: if the assembled report is invalid
        """
        logger.info(f"Starting analysis for {url}...")

        logger.info("Scraping website...")
        fetcher = self.fetcher or PageFactsFetcher()
        try:
            raw_facts = await fetcher.fetch(url)
        finally:
            if self.fetcher is None:
                await fetcher.close()

        return await self.analyze_page_facts(raw_facts, url=url)

    async def close(self):
        """Close the injected fetcher and the integration clients."""
        if self.fetcher:
            await self.fetcher.close()
        if self.clients:
            await self.clients.close()

    async def analyze_page_facts(self, raw_facts: Any, url: Optional[str] = None) -> AnalysisResult:
        """Run the pipeline on already-fetched (possibly malformed) page facts."""
        start_time = datetime.utcnow()

        facts = sanitize_page_facts(raw_facts)
        report_url = url or facts.url

        logger.info("Extracting brand information...")
        brand = await self.brand_extractor.extract(facts)

        logger.info("Discovering competitors and analyzing AI platform visibility...")
        competitors, visibility = await asyncio.gather(
            self.competitor_discovery.discover(brand, facts),
            self.visibility_estimator.estimate(brand, facts),
        )
        logger.info(visibility.probe.summary)

        logger.info("Calculating dimension scores...")
        dimension_scores = calculate_dimension_scores(facts)

        logger.info("Detecting content gaps...")
        gaps = detect_gaps(facts)

        logger.info("Generating recommendations...")
        recommendations = await self.recommendation_generator.generate(
            facts, brand, gaps, visibility.platform_scores
        )

        overall_score = calculate_overall_score(visibility.platform_scores, dimension_scores)

        logger.info("Calculating GEO metrics...")
        geo_metrics = calculate_geo_metrics(facts)

        result = assemble_result(
            url=report_url,
            brand=brand,
            overall_score=overall_score,
            platform_scores=visibility.platform_scores,
            dimension_scores=dimension_scores,
            competitors=competitors,
            gaps=gaps,
            recommendations=recommendations,
            geo_metrics=geo_metrics,
            competitor_analysis=generate_competitor_analysis(competitors, brand, facts),
            platform_score_details=generate_platform_score_details(
                visibility.platform_scores, facts, geo_metrics
            ),
            accuracy_checks=perform_accuracy_checks(brand, facts),
            quick_wins=generate_quick_wins(facts),
            strategic_bets=generate_strategic_bets(),
        )

        duration = (datetime.utcnow() - start_time).total_seconds()
        logger.info(
            f"Analysis complete for {report_url}: overall={result.overall_score}, "
            f"competitors={len(result.competitors)}, "
            f"recommendations={len(result.recommendations)} ({duration:.1f}s)"
        )
        if self.claude_client:
            logger.debug(f"Claude usage so far: {self.claude_client.usage}")
        return result


# ============================================================================
# FACTORY FUNCTION
# ============================================================================

def create_visibility_analyzer(
    settings: Optional["Settings"] = None,
    clients: Optional["ExternalAPIClients"] = None,
) -> VisibilityAnalyzer:
    """
    Build an analyzer from environment configuration.

    Args:
        settings: Application settings (defaults to get_settings())
        clients: External API clients (defaults to env-based clients)

    Returns:
        VisibilityAnalyzer wired with every configured integration
    """
    from ..integrations.config import ExternalAPIClients
    from ..utils.config import get_settings

    settings = settings or get_settings()
    clients = clients or ExternalAPIClients()
    clients.config.log_status()

    claude_client = None
    if settings.ANTHROPIC_API_KEY:
        claude_client = ClaudeClient(api_key=settings.ANTHROPIC_API_KEY, model=settings.CLAUDE_MODEL)
    else:
        logger.warning("ANTHROPIC_API_KEY not set - generative steps will use fallbacks")

    return VisibilityAnalyzer(
        claude_client=claude_client,
        fetcher=PageFactsFetcher(timeout=settings.PAGE_FETCH_TIMEOUT),
        tracxn_client=clients.tracxn,
        probe=LiveVisibilityProbe(clients.perplexity, delay_seconds=settings.LIVE_PROBE_DELAY_SECONDS),
        clients=clients,
    )


# ============================================================================
# MANUAL RUN
# ============================================================================

async def _run_once(url: str):
    """Analyze one URL with env configuration and print the report."""
    import json
    from dotenv import load_dotenv

    load_dotenv()

    analyzer = create_visibility_analyzer()
    try:
        result = await analyzer.analyze(url)
    finally:
        await analyzer.close()

    print(json.dumps(result.to_dict(), indent=2))


if __name__ == "__main__":
    import sys

    logging.basicConfig(level=logging.INFO)
    asyncio.run(_run_once(sys.argv[1] if len(sys.argv) > 1 else "https://example.com"))
