"""Turn raw model text into summaries or clean source code."""

from __future__ import annotations

import json
import logging
from typing import Any, List

from .errors import MalformedSummaryResponse
from .models import SummariesParsed, SummaryParseError, SummaryParseResult, TestSummary

logger = logging.getLogger(__name__)

FENCE = "```"
KNOWN_FENCE_TAGS = frozenset({"javascript", "js", "jsx", "typescript", "ts", "tsx"})


def parse_summaries(raw_text: str) -> SummaryParseResult:
    """Parse structured summary output without raising."""
    try:
        payload: Any = json.loads(raw_text)
    except (TypeError, json.JSONDecodeError) as exc:
        return SummaryParseError(f"Response is not valid JSON: {exc}")

    if not isinstance(payload, dict):
        return SummaryParseError("Response is not a JSON object")
    items = payload.get("summaries")
    if not isinstance(items, list):
        return SummaryParseError("Response has no `summaries` array")

    summaries: List[TestSummary] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            return SummaryParseError(f"Summary {index} is not an object")
        title = item.get("title")
        description = item.get("description")
        if not isinstance(title, str) or not isinstance(description, str):
            return SummaryParseError(f"Summary {index} needs string `title` and `description`")
        summaries.append(TestSummary(title=title, description=description))
    return SummariesParsed(summaries)


def to_summaries(raw_text: str) -> List[TestSummary]:
    """Return the summaries in ``raw_text`` or raise MalformedSummaryResponse."""
    result = parse_summaries(raw_text)
    if isinstance(result, SummaryParseError):
        logger.warning("Malformed summary response: %s. Preview: %r", result.reason, raw_text[:500])
        raise MalformedSummaryResponse(f"Malformed summary response: {result.reason}")
    return result.summaries


def to_code(raw_text: str) -> str:
    """Strip a leading code fence (plain or with a known language tag) and its closing fence.

    Text that does not start with a recognised fence is returned unchanged.
    """
    if not raw_text.startswith(FENCE):
        return raw_text

    opening, _, body = raw_text[len(FENCE):].partition("\n")
    tag = opening.strip()
    if tag and tag not in KNOWN_FENCE_TAGS:
        return raw_text

    stripped = body.rstrip()
    if stripped.endswith(FENCE):
        stripped = stripped[: -len(FENCE)]
    return stripped.strip()
