"""
Output Parser for Generative Model Responses

The generative model is asked for a single JSON object but its output is
untrusted: it may be wrapped in markdown fences, surrounded by prose,
truncated, or not JSON at all. Everything here degrades to ``None`` rather
than raising, so each pipeline step can switch to its deterministic
fallback.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


def extract_json_object(raw_output: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Parse a JSON object out of raw model output.

    Tries, in order:
    1. The whole text as JSON
    2. A fenced ```json block
    3. The outermost {...} span

    Returns:
        The parsed dict, or None if no JSON object could be recovered
    """
    if not raw_output or not isinstance(raw_output, str):
        return None

    text = raw_output.strip()

    candidates = [text]

    fenced = re.search(r'```(?:json)?\s*(\{[\s\S]*?\})\s*```', text)
    if fenced:
        candidates.append(fenced.group(1))

    braces = re.search(r'\{[\s\S]*\}', text)
    if braces:
        candidates.append(braces.group())

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    logger.debug(f"No JSON object found in model output ({len(text)} chars)")
    return None


def as_text(value: Any) -> Optional[str]:
    """Return a stripped non-empty string, or None."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def as_number(value: Any) -> Optional[float]:
    """Return a finite number for int/float/numeric-string input, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number


def string_items(value: Any) -> List[str]:
    """Keep only the string entries of a list; anything else yields []."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]
