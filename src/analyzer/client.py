"""
Claude API Client for the Visibility Analyzer

Every pipeline step that needs unstructured extraction, ranking or writing
goes through ``complete()``. It never raises: a failed call yields an empty
string and the caller falls back to its deterministic default. There are no
retries.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import anthropic

logger = logging.getLogger(__name__)

JSON_MODE_SYSTEM = (
    "You are a precise analysis engine. Respond with a single valid JSON "
    "object and nothing else. Do not wrap it in markdown."
)


@dataclass
class Completion:
    """One model call: its text, token counts, and error if it failed."""
    text: str = ""
    input_tokens: int = 0
    output_tokens: int = 0
    stop_reason: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ClaudeClient:
    """
    Async wrapper around ``anthropic.AsyncAnthropic``.

    Usage:
        client = ClaudeClient(api_key=settings.ANTHROPIC_API_KEY)
        text = await client.complete(prompt, json_mode=True)
    """

    DEFAULT_MODEL = "claude-sonnet-4-20250514"
    MAX_TOKENS = 2000
    TEMPERATURE = 0.3

    def __init__(self, api_key: str, model: Optional[str] = None, timeout: float = 60.0):
        if not api_key:
            raise ValueError("ANTHROPIC_API_KEY not provided")

        self.model = model or self.DEFAULT_MODEL
        self.async_client = anthropic.AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)

        self.calls = 0
        self.failed_calls = 0
        self.input_tokens = 0
        self.output_tokens = 0

    async def create(
        self,
        prompt: str,
        system: Optional[str] = None,
        temperature: float = TEMPERATURE,
    ) -> Completion:
        """Single message round-trip; API errors become a failed Completion."""
        request = {
            "model": self.model,
            "max_tokens": self.MAX_TOKENS,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            request["system"] = system

        self.calls += 1
        try:
            message = await self.async_client.messages.create(**request)
        except anthropic.APIError as e:
            self.failed_calls += 1
            logger.error(f"Claude API error: {e}")
            return Completion(error=str(e))

        text = "".join(block.text for block in message.content if getattr(block, "type", None) == "text")
        completion = Completion(
            text=text,
            input_tokens=message.usage.input_tokens,
            output_tokens=message.usage.output_tokens,
            stop_reason=message.stop_reason,
        )
        self.input_tokens += completion.input_tokens
        self.output_tokens += completion.output_tokens

        logger.info(
            f"Claude call: {completion.input_tokens} in, {completion.output_tokens} out "
            f"(temperature={temperature})"
        )
        return completion

    async def complete(
        self,
        prompt: str,
        json_mode: bool = False,
        temperature: float = TEMPERATURE,
    ) -> str:
        """
        Return the raw completion text, or "" when the call failed.

        The text is untrusted; callers parse it and fall back on failure.
        """
        completion = await self.create(
            prompt,
            system=JSON_MODE_SYSTEM if json_mode else None,
            temperature=temperature,
        )
        return completion.text if completion.ok else ""

    @property
    def usage(self) -> Dict[str, int]:
        return {
            "calls": self.calls,
            "failed_calls": self.failed_calls,
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
        }
