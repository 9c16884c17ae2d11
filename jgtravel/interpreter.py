"""Turn a model reply into a renderable itinerary.

Interpretation runs three tiers, first success wins:

1. an embedded JSON object (preferably inside a fenced ```json block) that
   validates as a :class:`StructuredItinerary`;
2. Markdown split into sections on "Day N" heading lines;
3. the reply text as-is.

Every function here is pure and never raises on malformed input. A JSON object
that fails to parse or validate is discarded whole; nothing is salvaged from
it, and the reply falls through to the heading split.
"""
from __future__ import annotations

import json
import re
from typing import Any, List, Optional

from pydantic import ValidationError

from jgtravel.logs import get_logger
from jgtravel.schemas import DaySection, InterpretedItinerary, StructuredItinerary

logger = get_logger(__name__)

_FENCED_JSON_PATTERN = re.compile(r"```json\s*(.*?)```", re.IGNORECASE | re.DOTALL)
_TRAILING_COMMA_PATTERN = re.compile(r",\s*([}\]])")
DAY_HEADING_PATTERN = re.compile(r"^[\s#*]*day\s*\d+", re.IGNORECASE)

_ITINERARY_KEYS = {
    "overview",
    "totalNights",
    "total_nights",
    "route",
    "days",
    "costGuidance",
    "cost_guidance",
    "summary",
}


def _json_candidate(text: str) -> Optional[str]:
    match = _FENCED_JSON_PATTERN.search(text)
    block = match.group(1) if match else text
    start = block.find("{")
    end = block.rfind("}")
    if start == -1 or end <= start:
        return None
    return block[start : end + 1]


def _loads(candidate: str) -> Any:
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        pass
    sanitised = _TRAILING_COMMA_PATTERN.sub(r"\1", candidate)
    try:
        return json.loads(sanitised)
    except json.JSONDecodeError as exc:
        logger.debug("Discarding unparseable JSON block: %s", exc)
        return None


def extract_structured(text: str) -> Optional[StructuredItinerary]:
    """Return the structured itinerary embedded in ``text`` or ``None``."""
    if not text:
        return None
    candidate = _json_candidate(text)
    if candidate is None:
        return None
    data = _loads(candidate)
    if not isinstance(data, dict) or not _ITINERARY_KEYS.intersection(data):
        return None
    try:
        return StructuredItinerary.model_validate(data)
    except ValidationError as exc:
        logger.debug("Discarding JSON block that does not match the itinerary shape: %s", exc)
        return None


def _heading_title(line: str) -> str:
    return line.lstrip("#* \t").rstrip("* \t")


def _split_on_headings(text: str) -> tuple[str, List[DaySection]]:
    preamble: List[str] = []
    sections: List[DaySection] = []
    title: Optional[str] = None
    body: List[str] = []

    for line in text.splitlines():
        if DAY_HEADING_PATTERN.match(line):
            if title is not None:
                sections.append(DaySection(title=title, body="\n".join(body).strip()))
            title = _heading_title(line)
            body = []
        elif title is None:
            preamble.append(line)
        else:
            body.append(line)
    if title is not None:
        sections.append(DaySection(title=title, body="\n".join(body).strip()))
    return "\n".join(preamble).strip(), sections


def split_days(text: str) -> List[DaySection]:
    """Split Markdown into "Day N" sections.

    Text with no day headings comes back as a single "Overview" section.
    """
    preamble, sections = _split_on_headings(text or "")
    if not sections:
        return [DaySection(title="Overview", body=(text or "").strip())]
    if preamble:
        return [DaySection(title="Overview", body=preamble), *sections]
    return sections


def interpret(text: str) -> InterpretedItinerary:
    """Pick the richest renderable form of a model reply."""
    text = text if isinstance(text, str) else ""

    structured = extract_structured(text)
    if structured is not None:
        return InterpretedItinerary(kind="structured", structured=structured)

    preamble, sections = _split_on_headings(text)
    if sections:
        return InterpretedItinerary(kind="sections", sections=sections, preamble=preamble or None)

    return InterpretedItinerary(kind="raw", raw=text)
