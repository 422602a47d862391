"""
Competitor Discovery

Builds the ranked competitor list for the analyzed brand:

1. Optional Tracxn lookup: up to 5 competitor candidates plus the brand's
   own company profile. Lookup failures are non-fatal.
2. Generative ranking: the model ranks the candidates (or names 3-4 real
   competitors when there are none) and estimates where the brand sits.
3. The brand is inserted at that rank with a placeholder score; the
   assembler later patches in the real overall score.
4. Entries are coerced, enriched from Tracxn data and renumbered 1..N by
   position.

Fallbacks when the model output is unusable:
- Tracxn candidates available: brand at rank 1, candidates after it
- Nothing available: the brand alone at rank 1

The result is never empty and always holds exactly one current-brand entry.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

from src.integrations.tracxn import TracxnCompany, TracxnCompetitor, TracxnError
from src.models import BrandInfo, Competitor, PageFacts
from src.output.parser import as_number, as_text, extract_json_object, string_items
from src.scoring.helpers import clamp_score

if TYPE_CHECKING:
    from src.analyzer.client import ClaudeClient
    from src.integrations.tracxn import TracxnClient

logger = logging.getLogger(__name__)

CANDIDATE_LIMIT = 5
UNKNOWN_DOMAIN = "unknown.com"
CURRENT_BRAND_STRENGTHS = ["Current analysis target"]
LOOKUP_FALLBACK_STRENGTHS = ["Market presence", "Industry leader"]


# =============================================================================
# PROMPTS
# =============================================================================


RANKING_PROMPT = """You are analyzing competitors for {name} ({domain}), a company in the {industry} industry.

Based on this information:
- Industry: {industry}
- Description: {description}
{known_competitors}
{task}

For each competitor, provide:
1. name: Company name
2. domain: Their website domain
3. score: Estimated AI visibility score (60-95)
4. marketOverlap: How much they overlap with {name} (50-90%)
5. strengths: 2-3 specific strengths (be realistic)

Also rank {name} among these competitors based on typical market position.

Return JSON:
{{
  "competitors": [
    {{
      "rank": 1,
      "name": "Competitor Name",
      "domain": "competitor.com",
      "score": 85,
      "marketOverlap": 75,
      "strengths": ["strength 1", "strength 2"]
    }}
  ],
  "yourRank": 2
}}"""

RANK_KNOWN_TASK = "Using the provided competitor list, analyze and rank them."
DISCOVER_TASK = (
    "Generate a realistic list of 3-4 ACTUAL competitors in this space. "
    "These should be real companies that compete in the same market."
)


def build_ranking_prompt(brand: BrandInfo, candidates: List[TracxnCompetitor]) -> str:
    known = ""
    if candidates:
        known = "- Known competitors: " + ", ".join(f"{c.name} ({c.domain})" for c in candidates)

    return RANKING_PROMPT.format(
        name=brand.name,
        domain=brand.domain,
        industry=brand.industry,
        description=brand.description,
        known_competitors=known,
        task=RANK_KNOWN_TASK if candidates else DISCOVER_TASK,
    )


def current_brand_entry(
    brand: BrandInfo,
    profile: Optional[TracxnCompany] = None,
    rank: int = 1,
) -> Competitor:
    """The analyzed brand with a placeholder score of 0."""
    return Competitor(
        rank=rank,
        name=brand.name,
        domain=brand.domain,
        score=0,
        market_overlap=100,
        strengths=list(CURRENT_BRAND_STRENGTHS),
        is_current_brand=True,
        funding=profile.funding_total if profile else None,
        employees=profile.employees if profile else None,
        founded=profile.founded if profile else None,
        description=profile.description if profile else None,
    )


def _match_candidate(
    candidates: List[TracxnCompetitor],
    name: str,
    domain: str,
) -> Optional[TracxnCompetitor]:
    for candidate in candidates:
        if candidate.domain.lower() == domain.lower() or candidate.name.lower() == name.lower():
            return candidate
    return None


class CompetitorDiscovery:
    """
    Discovers and ranks competitors.

    Usage:
        discovery = CompetitorDiscovery(claude_client, tracxn_client)
        competitors = await discovery.discover(brand_info, page_facts)
    """

    def __init__(
        self,
        claude_client: Optional["ClaudeClient"] = None,
        tracxn_client: Optional["TracxnClient"] = None,
    ):
        self.claude_client = claude_client
        self.tracxn_client = tracxn_client

    async def discover(self, brand: BrandInfo, facts: PageFacts) -> List[Competitor]:
        """
        Build the ranked competitor list. Never raises.

        Args:
            brand: Extracted brand info
            facts: Sanitized page facts

        Returns:
            Competitors ranked 1..N, exactly one flagged as the current brand
        """
        candidates, profile = await self._lookup(brand.domain)

        data = None
        if self.claude_client:
            raw = await self.claude_client.complete(
                build_ranking_prompt(brand, candidates),
                json_mode=True,
                temperature=0.8,
            )
            data = extract_json_object(raw)

        entries = data.get("competitors") if data else None
        if isinstance(entries, list):
            competitors = self._rank_model_entries(
                brand, entries, data.get("yourRank"), candidates, profile
            )
            logger.info(f"Ranked {len(competitors)} competitors (brand at #{self._brand_rank(competitors)})")
            return competitors

        logger.warning("Failed to parse competitors JSON, using fallback ranking")
        return self._fallback(brand, candidates, profile)

    async def _lookup(
        self,
        domain: str,
    ) -> Tuple[List[TracxnCompetitor], Optional[TracxnCompany]]:
        """Fetch Tracxn candidates and the brand's own profile."""
        if not self.tracxn_client:
            return [], None

        logger.info("Fetching competitors from Tracxn...")
        try:
            candidates = await self.tracxn_client.get_competitors(domain, CANDIDATE_LIMIT)
            profile = await self.tracxn_client.search_company(domain)
        except TracxnError as e:
            logger.warning(f"Tracxn lookup failed for {domain}: {e}")
            return [], None

        logger.info(f"Found {len(candidates)} competitors from Tracxn")
        return candidates[:CANDIDATE_LIMIT], profile

    def _rank_model_entries(
        self,
        brand: BrandInfo,
        entries: List[Any],
        your_rank: Any,
        candidates: List[TracxnCompetitor],
        profile: Optional[TracxnCompany],
    ) -> List[Competitor]:
        rows: List[Dict[str, Any]] = []
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            name = as_text(entry.get("name"))
            if not name:
                continue
            domain = as_text(entry.get("domain")) or UNKNOWN_DOMAIN
            # The brand itself is inserted separately
            if domain.lower() == brand.domain.lower():
                continue

            # Tracxn values win over model guesses
            match = _match_candidate(candidates, name, domain) or TracxnCompetitor(name="", domain="")
            rows.append({
                "name": name,
                "domain": domain,
                "score": clamp_score(as_number(entry.get("score")) or 0),
                "market_overlap": clamp_score(as_number(entry.get("marketOverlap")) or 0),
                "strengths": string_items(entry.get("strengths")),
                "funding": match.funding or as_number(entry.get("funding")),
                "employees": match.employees or self._int_field(entry, "employees"),
                "founded": self._int_field(entry, "founded"),
                "description": match.description or as_text(entry.get("description")),
            })

        position = as_number(your_rank)
        insert_at = int(position) - 1 if position is not None else 0
        insert_at = max(0, min(len(rows), insert_at))

        competitors = [Competitor(rank=1, **row) for row in rows]
        competitors.insert(insert_at, current_brand_entry(brand, profile))
        return self.renumber(competitors)

    def _fallback(
        self,
        brand: BrandInfo,
        candidates: List[TracxnCompetitor],
        profile: Optional[TracxnCompany],
    ) -> List[Competitor]:
        competitors = [current_brand_entry(brand, profile)]
        for candidate in candidates:
            if candidate.domain.lower() == brand.domain.lower():
                continue
            similarity = clamp_score(candidate.similarity * 100)
            competitors.append(
                Competitor(
                    rank=1,
                    name=candidate.name,
                    domain=candidate.domain,
                    score=similarity,
                    market_overlap=similarity,
                    strengths=list(LOOKUP_FALLBACK_STRENGTHS),
                    funding=candidate.funding,
                    employees=candidate.employees,
                    description=candidate.description,
                )
            )
        return self.renumber(competitors)

    @staticmethod
    def renumber(competitors: List[Competitor]) -> List[Competitor]:
        """Assign ranks 1..N by list position."""
        return [c.model_copy(update={"rank": idx}) for idx, c in enumerate(competitors, start=1)]

    @staticmethod
    def _int_field(entry: Dict[str, Any], key: str) -> Optional[int]:
        value = as_number(entry.get(key))
        return int(value) if value is not None else None

    @staticmethod
    def _brand_rank(competitors: List[Competitor]) -> int:
        return next(c.rank for c in competitors if c.is_current_brand)


async def discover_competitors(
    brand: BrandInfo,
    facts: PageFacts,
    claude_client: Optional["ClaudeClient"] = None,
    tracxn_client: Optional["TracxnClient"] = None,
) -> List[Competitor]:
    """Convenience wrapper around CompetitorDiscovery."""
    discovery = CompetitorDiscovery(claude_client=claude_client, tracxn_client=tracxn_client)
    return await discovery.discover(brand, facts)
