"""
LLM Response Parsing

Helpers that pull structured data out of free-form model output.
Search-grounded responses cannot use JSON mode, so JSON is located by
scanning for the outermost brackets.
"""

import json
import re
from typing import Optional

_FENCE_START = re.compile(r"^```(?:json)?\s*")
_FENCE_END = re.compile(r"\s*```$")
_ARRAY = re.compile(r"\[[\s\S]*\]")
_OBJECT = re.compile(r"\{[\s\S]*\}")
_NUMBER = re.compile(r"\d+(?:\.\d+)?|\.\d+")
_CONTEXT_PRICE = re.compile(r"PRICE:\s*([\d,.]+)")
_CONTEXT_NEWS = re.compile(r"NEWS:\s*(.+)")


def clean_json_string(text: Optional[str]) -> str:
    """Strip surrounding ``` / ```json fences."""
    if not text:
        return ""
    clean = text.strip()
    clean = _FENCE_START.sub("", clean)
    clean = _FENCE_END.sub("", clean)
    return clean


def parse_json(text: Optional[str]):
    """Parse a (possibly fenced) JSON document. Raises ValueError."""
    clean = clean_json_string(text)
    if not clean:
        raise ValueError("Empty LLM response")
    try:
        return json.loads(clean)
    except json.JSONDecodeError as e:
        raise ValueError(f"LLM returned invalid JSON: {e}") from e


def extract_json_array(text: Optional[str]) -> Optional[list]:
    """First [...] span in the text, or None."""
    match = _ARRAY.search(text or "")
    if not match:
        return None
    value = json.loads(match.group(0))
    return value if isinstance(value, list) else None


def extract_json_object(text: Optional[str]) -> Optional[dict]:
    """First {...} span in the text, or None."""
    match = _OBJECT.search(text or "")
    if not match:
        return None
    value = json.loads(match.group(0))
    return value if isinstance(value, dict) else None


def parse_price_text(text: Optional[str]) -> Optional[float]:
    """
    Read a bare price like '142.50' or '$1,234.5 USD'.

    Everything except digits and dots is dropped first, then the leading
    number is taken.
    """
    digits = re.sub(r"[^0-9.]", "", (text or "").strip())
    match = _NUMBER.match(digits)
    if not match:
        return None
    return float(match.group(0))


def parse_context_text(text: Optional[str]) -> tuple[Optional[str], str]:
    """
    Split a 'PRICE: ... / NEWS: ...' answer.

    Returns (price_text, news_summary); the whole text is the summary when
    no NEWS line is present.
    """
    text = text or ""
    price_match = _CONTEXT_PRICE.search(text)
    news_match = _CONTEXT_NEWS.search(text)

    price = price_match.group(1).strip() if price_match else None
    news = news_match.group(1).strip() if news_match else text
    return price, news
