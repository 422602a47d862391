"""
Perplexity API Client

Web-grounded answer engine used as the live visibility probe: the analyzer
asks it the questions a buyer would ask and checks whether the brand shows
up in the answer.

Each question is a single attempt. A failure raises PerplexityError and the
probe counts that question as "not mentioned".

API: https://docs.perplexity.ai/
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

import httpx

logger = logging.getLogger(__name__)

PROBE_SYSTEM_PROMPT = (
    "Answer the question the way you would for a buyer researching options. "
    "Name specific products and companies."
)


class PerplexityError(Exception):
    """Custom exception for Perplexity API errors."""

    def __init__(self, message: str, status_code: int = None, response: dict = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


@dataclass
class PerplexityResult:
    """Answer to one probe question."""

    answer: str
    citations: List[str] = field(default_factory=list)
    query: str = ""
    model: str = ""


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"API error: {response.status_code}"
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return f"API error: {error['message']}"
    return f"API error: {response.status_code}"


def _answer_text(data: Dict[str, Any]) -> str:
    """
    Text of the first choice.

    Raises:
        PerplexityError: if the body is not a chat completion
    """
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        raise PerplexityError("Malformed response: no choices", response=data)

    message = choices[0].get("message")
    if not isinstance(message, dict):
        raise PerplexityError("Malformed response: choice has no message", response=data)

    content = message.get("content")
    if content is None:
        return ""
    if not isinstance(content, str):
        raise PerplexityError("Malformed response: content is not text", response=data)
    return content


class PerplexityClient:
    """
    Async client for the Perplexity chat completions endpoint.

    Usage:
        async with PerplexityClient(api_key="...") as client:
            result = await client.query("What are the best CRM tools?")
    """

    BASE_URL = "https://api.perplexity.ai"

    def __init__(
        self,
        api_key: str,
        model: str = "sonar",
        timeout: float = 60.0,
    ):
        self.model = model
        self._client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(timeout),
        )
        self._closed = False

    async def query(self, question: str, max_tokens: int = 1024) -> PerplexityResult:
        """
        Ask one question.

        Raises:
            PerplexityError: on HTTP errors, timeouts, network failures and
                malformed bodies
        """
        if self._closed:
            raise PerplexityError("Client has been closed")

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": PROBE_SYSTEM_PROMPT},
                {"role": "user", "content": question},
            ],
            "temperature": 0.2,
            "max_tokens": max_tokens,
        }

        data = await self._post(payload)
        citations = data.get("citations")
        if not isinstance(citations, list):
            citations = []
        return PerplexityResult(
            answer=_answer_text(data),
            citations=[c for c in citations if isinstance(c, str)],
            query=question,
            model=self.model,
        )

    async def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self._client.post("/chat/completions", json=payload)
        except httpx.TimeoutException as e:
            raise PerplexityError(f"Request timed out: {e}")
        except httpx.RequestError as e:
            raise PerplexityError(f"Request failed: {e}")

        if response.status_code >= 400:
            logger.warning(f"Perplexity returned {response.status_code}")
            raise PerplexityError(_error_message(response), status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise PerplexityError(f"Invalid JSON response: {e}", status_code=response.status_code)
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
