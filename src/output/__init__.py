"""
Output Processing Module

Tolerant parsing of generative-model output. Every helper returns None
(or an empty value) instead of raising, so callers can fall back.
"""

from .parser import (
    extract_json_object,
    as_text,
    as_number,
    string_items,
)

__all__ = [
    "extract_json_object",
    "as_text",
    "as_number",
    "string_items",
]
