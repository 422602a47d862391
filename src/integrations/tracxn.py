"""
Tracxn API Client

Competitor intelligence lookup: company profiles (funding, headcount,
founding year) and ranked competitor lists by domain.

API: https://api.tracxn.com/
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class TracxnError(Exception):
    """Custom exception for Tracxn API errors."""

    def __init__(self, message: str, status_code: int = None, response: dict = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


@dataclass
class TracxnCompany:
    """Company profile from Tracxn."""

    name: str
    domain: Optional[str] = None
    description: Optional[str] = None
    funding_total: Optional[float] = None
    funding_currency: str = "USD"
    employees: Optional[int] = None
    founded: Optional[int] = None
    headquarters: Optional[str] = None
    categories: List[str] = field(default_factory=list)


@dataclass
class TracxnCompetitor:
    """Competitor candidate from Tracxn."""

    name: str
    domain: str
    similarity: float = 0.5
    description: Optional[str] = None
    funding: Optional[float] = None
    employees: Optional[int] = None


def _int_or_none(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    return None


def _float_or_none(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def _text_or_none(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _records(data: Dict[str, Any], key: str) -> List[Any]:
    """
    The list stored under ``key``; missing or null means no records.

    Raises:
        TracxnError: if the value is present but is not a list
    """
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise TracxnError(f"Malformed response: '{key}' is not a list", response=data)
    return value


def _funding(record: Dict[str, Any]) -> Dict[str, Any]:
    funding = record.get("funding")
    return funding if isinstance(funding, dict) else {}


class TracxnClient:
    """
    Async client for the Tracxn API.

    Usage:
        async with TracxnClient(api_key="your_api_key") as client:
            company = await client.search_company("notion.so")
            competitors = await client.get_competitors("notion.so", limit=5)
    """

    BASE_URL = "https://api.tracxn.com/1.0"

    def __init__(self, api_key: str, timeout: float = 30.0):
        """
        Initialize Tracxn client.

        Args:
            api_key: Tracxn API key
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self._client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(timeout),
        )
        self._closed = False

    async def search_company(self, domain: str) -> Optional[TracxnCompany]:
        """
        Look up the company that owns ``domain``.

        Returns:
            TracxnCompany, or None when Tracxn has no match

        Raises:
            TracxnError: on HTTP errors or a malformed body
        """
        data = await self._get("/search/companies", params={"domain": domain})
        companies = _records(data, "companies")
        if not companies or not isinstance(companies[0], dict):
            return None

        company = companies[0]
        funding = _funding(company)
        categories = company.get("categories")
        return TracxnCompany(
            name=_text_or_none(company.get("name")) or domain,
            domain=_text_or_none(company.get("domain")),
            description=_text_or_none(company.get("description")),
            funding_total=_float_or_none(funding.get("total_funding")),
            funding_currency=_text_or_none(funding.get("currency")) or "USD",
            employees=_int_or_none(company.get("employees_count")),
            founded=_int_or_none(company.get("founded_year")),
            headquarters=_text_or_none(company.get("headquarters")),
            categories=[c for c in categories if isinstance(c, str)] if isinstance(categories, list) else [],
        )

    async def get_competitors(self, domain: str, limit: int = 10) -> List[TracxnCompetitor]:
        """
        Fetch ranked competitor candidates for ``domain``.

        Entries without a textual name or domain are skipped.

        Raises:
            TracxnError: on HTTP errors or a malformed body
        """
        data = await self._get(
            "/companies/competitors",
            params={"domain": domain, "limit": limit},
        )

        competitors = []
        for comp in _records(data, "competitors"):
            if not isinstance(comp, dict):
                continue
            name = _text_or_none(comp.get("name"))
            comp_domain = _text_or_none(comp.get("domain"))
            if not name or not comp_domain:
                continue
            similarity = _float_or_none(comp.get("similarity_score"))
            competitors.append(
                TracxnCompetitor(
                    name=name,
                    domain=comp_domain,
                    similarity=similarity if similarity is not None else 0.5,
                    description=_text_or_none(comp.get("description")),
                    funding=_float_or_none(_funding(comp).get("total_funding")),
                    employees=_int_or_none(comp.get("employees_count")),
                )
            )
        return competitors[:limit]

    async def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Single GET request, no retries."""
        if self._closed:
            raise TracxnError("Client has been closed")

        try:
            response = await self._client.get(path, params=params)
        except httpx.TimeoutException as e:
            raise TracxnError(f"Request timed out: {e}")
        except httpx.RequestError as e:
            raise TracxnError(f"Request failed: {e}")

        if response.status_code >= 400:
            raise TracxnError(
                f"API error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise TracxnError(f"Invalid JSON response: {e}", status_code=response.status_code)

        return data if isinstance(data, dict) else {}

    async def close(self):
        """Close the HTTP client."""
        if not self._closed:
            await self._client.aclose()
            self._closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
