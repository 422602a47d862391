"""
Platform Visibility Estimator

Scores how visible the brand is on each AI assistant:

- **Perplexity** is measured live. Five fixed industry queries are sent one
  at a time with a fixed delay, and each answer is checked for a
  whole-word, case-insensitive mention of the brand name or domain.
  Score = round(100 × mentions / queries).
- **ChatGPT, Claude, Gemini** have no live access and are estimated by
  the generative model from page-feature signals.

Every score is clamped to 0-100 and tagged with the color of its slot in
the canonical platform order.
"""

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, TYPE_CHECKING

from src.integrations.perplexity import PerplexityError
from src.models import BrandInfo, PageFacts, PlatformScore
from src.output.parser import as_number, as_text, extract_json_object
from src.scoring.helpers import clamp_score

if TYPE_CHECKING:
    from src.analyzer.client import ClaudeClient
    from src.integrations.perplexity import PerplexityClient

logger = logging.getLogger(__name__)


# Canonical order and chart palette
PLATFORM_COLORS: Dict[str, str] = {
    "ChatGPT": "hsl(var(--chart-1))",
    "Claude": "hsl(var(--chart-3))",
    "Gemini": "hsl(var(--chart-4))",
    "Perplexity": "hsl(var(--chart-2))",
}
PLATFORMS = list(PLATFORM_COLORS)

LIVE_PLATFORM = "Perplexity"
ESTIMATED_PLATFORMS = [p for p in PLATFORMS if p != LIVE_PLATFORM]

DEFAULT_SCORES: Dict[str, int] = {
    "ChatGPT": 65,
    "Claude": 60,
    "Gemini": 62,
    "Perplexity": 58,
}
UNCONFIGURED_PROBE_SCORE = 65

PROBE_QUERY_TEMPLATES = [
    "What are the best {industry} tools?",
    "Recommend {industry} software for businesses",
    "Compare top {industry} platforms",
    "What {industry} solution should I use?",
    "List {industry} companies",
]

RESPONSE_EXCERPT_CHARS = 500
CONTEXT_CHARS = 50
PROBE_ERROR_RESPONSE = "Error: Could not complete query"


ESTIMATE_PROMPT = """Analyze how visible "{name}" ({domain}) would be across different AI platforms.

Website content quality indicators:
- Has FAQ: {has_faq}
- Has testimonials: {has_testimonials}
- Has pricing: {has_pricing}
- Has blog: {has_blog}
- Has comparisons: {has_comparisons}
- Has documentation: {has_documentation}
- Content length: {content_length} chars
- Meta description: {has_description}

Industry: {industry}

Based on these factors, estimate visibility scores (0-100) for each platform:
- ChatGPT: Favors comprehensive content, FAQs, clear descriptions
- Claude: Prefers detailed, well-structured content
- Gemini: Focuses on SEO signals, schema, structured data

Return JSON:
{{
  "platforms": [
    {{"platform": "ChatGPT", "score": 75}},
    {{"platform": "Claude", "score": 70}},
    {{"platform": "Gemini", "score": 68}}
  ]
}}"""


# =============================================================================
# LIVE PROBE
# =============================================================================


@dataclass
class ProbeTest:
    """One live probe query and what came back."""
    query: str
    response: str
    mentioned: bool
    context: str = ""


@dataclass
class ProbeResult:
    """Outcome of the live visibility probe."""
    platform: str
    score: int
    summary: str
    tests: List[ProbeTest] = field(default_factory=list)
    measured: bool = True


def _word_pattern(term: str) -> re.Pattern:
    return re.compile(rf"(?<!\w){re.escape(term)}(?!\w)", re.IGNORECASE)


def find_mention(text: str, brand_name: str, domain: str) -> Optional[re.Match]:
    """First whole-word, case-insensitive mention of the brand name or domain."""
    for term in (brand_name, domain):
        if not term:
            continue
        match = _word_pattern(term).search(text)
        if match:
            return match
    return None


def mention_context(text: str, match: re.Match) -> str:
    start = max(0, match.start() - CONTEXT_CHARS)
    end = min(len(text), match.end() + CONTEXT_CHARS)
    return f"...{text[start:end]}..."


class LiveVisibilityProbe:
    """
    Measures brand mentions in a real conversational model.

    Queries run sequentially with a fixed delay; this is the pipeline's
    only deliberate throughput ceiling.
    """

    def __init__(
        self,
        perplexity_client: Optional["PerplexityClient"] = None,
        delay_seconds: float = 0.5,
        platform: str = LIVE_PLATFORM,
    ):
        self.perplexity_client = perplexity_client
        self.delay_seconds = delay_seconds
        self.platform = platform

    @staticmethod
    def build_queries(industry: str) -> List[str]:
        return [template.format(industry=industry) for template in PROBE_QUERY_TEMPLATES]

    async def measure(self, brand: BrandInfo) -> ProbeResult:
        """Run the probe queries and score the mention rate. Never raises."""
        if not self.perplexity_client:
            logger.info(f"{self.platform} probe not configured, using estimated score")
            return ProbeResult(
                platform=self.platform,
                score=UNCONFIGURED_PROBE_SCORE,
                summary=f"{self.platform} API key not configured - using estimated visibility score",
                measured=False,
            )

        queries = self.build_queries(brand.industry)
        logger.info(f"Testing {self.platform} visibility for {brand.name} with {len(queries)} queries...")

        tests: List[ProbeTest] = []
        for idx, query in enumerate(queries):
            if idx > 0:
                await asyncio.sleep(self.delay_seconds)
            tests.append(await self._run_query(query, brand))

        mentions = sum(1 for t in tests if t.mentioned)
        rate = mentions / len(queries)
        score = clamp_score(rate * 100)
        summary = (
            f"{brand.name} was mentioned in {mentions} out of {len(queries)} "
            f"{self.platform} queries ({round(rate * 100)}% visibility rate)"
        )
        logger.info(f"{self.platform} visibility test complete: {summary}")

        return ProbeResult(platform=self.platform, score=score, summary=summary, tests=tests)

    async def _run_query(self, query: str, brand: BrandInfo) -> ProbeTest:
        try:
            result = await self.perplexity_client.query(query)
        except PerplexityError as e:
            logger.warning(f"{self.platform} probe query failed: {query!r}: {e}")
            return ProbeTest(query=query, response=PROBE_ERROR_RESPONSE, mentioned=False)

        answer = result.answer or ""
        match = find_mention(answer, brand.name, brand.domain)
        return ProbeTest(
            query=query,
            response=answer[:RESPONSE_EXCERPT_CHARS],
            mentioned=match is not None,
            context=mention_context(answer, match) if match else "",
        )


# =============================================================================
# ESTIMATOR
# =============================================================================


@dataclass
class PlatformVisibility:
    """Per-platform scores plus the live probe details."""
    platform_scores: List[PlatformScore]
    probe: ProbeResult


def build_platform_scores(scores: Dict[str, float]) -> List[PlatformScore]:
    """PlatformScore list in canonical order; missing platforms get defaults."""
    return [
        PlatformScore(
            platform=platform,
            score=clamp_score(scores.get(platform, DEFAULT_SCORES[platform])),
            color=PLATFORM_COLORS[platform],
        )
        for platform in PLATFORMS
    ]


class PlatformVisibilityEstimator:
    """
    Combines the live probe with model-estimated scores.

    Usage:
        estimator = PlatformVisibilityEstimator(claude_client, LiveVisibilityProbe(perplexity))
        visibility = await estimator.estimate(brand_info, page_facts)
    """

    def __init__(
        self,
        claude_client: Optional["ClaudeClient"] = None,
        probe: Optional[LiveVisibilityProbe] = None,
    ):
        self.claude_client = claude_client
        self.probe = probe or LiveVisibilityProbe()

    async def estimate(self, brand: BrandInfo, facts: PageFacts) -> PlatformVisibility:
        """Score every platform. Never raises."""
        estimated, probe = await asyncio.gather(
            self._estimate_scores(brand, facts),
            self.probe.measure(brand),
        )
        scores = dict(estimated)
        scores[self.probe.platform] = probe.score
        return PlatformVisibility(platform_scores=build_platform_scores(scores), probe=probe)

    async def _estimate_scores(self, brand: BrandInfo, facts: PageFacts) -> Dict[str, float]:
        """Model estimates for platforms without live access; {} means defaults."""
        if not self.claude_client:
            return {}

        prompt = ESTIMATE_PROMPT.format(
            name=brand.name,
            domain=brand.domain,
            industry=brand.industry,
            has_faq=facts.has_faq,
            has_testimonials=facts.has_testimonials,
            has_pricing=facts.has_pricing,
            has_blog=facts.has_blog,
            has_comparisons=facts.has_comparisons,
            has_documentation=facts.has_documentation,
            content_length=len(facts.text_content),
            has_description="Yes" if facts.description else "No",
        )
        raw = await self.claude_client.complete(prompt, json_mode=True, temperature=0.3)
        data = extract_json_object(raw)
        entries = data.get("platforms") if data else None

        if not isinstance(entries, list):
            logger.warning("Failed to parse platform scores JSON, using default scores")
            return {}

        canonical = {p.lower(): p for p in ESTIMATED_PLATFORMS}
        scores: Dict[str, float] = {}
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            platform = canonical.get((as_text(entry.get("platform")) or "").lower())
            score = as_number(entry.get("score"))
            # Unknown names and the live platform are ignored
            if platform and score is not None:
                scores[platform] = score
        return scores
