"""
Parse and validate generation output into a RoadmapResult.

Known formatting noise around the JSON body is removed by an explicit list of
wrappers; anything else that fails to parse is a MalformedResponse.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, List, NamedTuple, Optional

from pydantic import ValidationError

from config import ReguflowConfig
from errors import MalformedResponse
from models import GroundingSource, RoadmapResult

logger = logging.getLogger(__name__)


class FormattingWrapper(NamedTuple):
    name: str
    prefix: str
    suffix: str


# Order matters: tagged fences before the bare fence.
FORMATTING_WRAPPERS = (
    FormattingWrapper("byte_order_mark", "\ufeff", ""),
    FormattingWrapper("json_fence", "```json", "```"),
    FormattingWrapper("json_fence_upper", "```JSON", "```"),
    FormattingWrapper("bare_fence", "```", "```"),
)

GROUNDING_KEYS = ("isGrounded", "groundingSources", "is_grounded", "grounding_sources")


def unwrap_formatting_noise(text: str) -> str:
    """Strip recognized wrappers repeatedly until the text stops changing."""
    current = (text or "").strip()
    changed = True
    while changed:
        changed = False
        for wrapper in FORMATTING_WRAPPERS:
            if not current.startswith(wrapper.prefix):
                continue
            body = current[len(wrapper.prefix):]
            if wrapper.suffix:
                if not body.rstrip().endswith(wrapper.suffix):
                    continue
                body = body.rstrip()[: -len(wrapper.suffix)]
            current = body.strip()
            changed = True
            break
    return current


def extract_grounding_sources(citations: Optional[Iterable[Any]]) -> List[GroundingSource]:
    """Keep citations with a web locator and map them to title/uri pairs."""
    sources: List[GroundingSource] = []
    for entry in citations or []:
        if not isinstance(entry, dict):
            continue
        web = entry.get("web") if isinstance(entry.get("web"), dict) else entry
        uri = web.get("url") or web.get("uri")
        if not isinstance(uri, str) or not uri.strip():
            continue
        title = web.get("title")
        sources.append(GroundingSource(title=title if isinstance(title, str) and title.strip() else uri, uri=uri))
    return sources


def _missing_fields(payload: Dict[str, Any]) -> List[str]:
    return [key for key in ReguflowConfig.REQUIRED_FIELDS if key not in payload]


def parse_and_validate(
    raw_text: str,
    citations: Optional[Iterable[Any]] = None,
    augmentation_requested: bool = False,
) -> RoadmapResult:
    """
    Turn raw model text into a RoadmapResult.

    Args:
        raw_text: Text returned by the generation service
        citations: Citation annotations surfaced by the adapter
        augmentation_requested: Whether the tier enabled live web search

    Returns:
        Validated, immutable RoadmapResult

    Raises:
        MalformedResponse: empty text, unparseable JSON, or schema violation
    """
    if not raw_text or not raw_text.strip():
        raise MalformedResponse("Empty response text.")

    cleaned = unwrap_formatting_noise(raw_text)
    try:
        payload = json.loads(cleaned)
    except (json.JSONDecodeError, RecursionError) as exc:
        logger.error(f"JSON parsing error: {cleaned[:500]}")
        raise MalformedResponse(f"Response is not valid JSON: {getattr(exc, 'msg', exc)}") from exc

    if not isinstance(payload, dict):
        raise MalformedResponse(f"Expected a JSON object, got {type(payload).__name__}.")

    missing = _missing_fields(payload)
    if missing:
        raise MalformedResponse(f"Missing required fields: {', '.join(missing)}")

    for key in GROUNDING_KEYS:
        payload.pop(key, None)

    if augmentation_requested:
        sources = extract_grounding_sources(citations)
        if sources:
            payload["isGrounded"] = True
            payload["groundingSources"] = [source.model_dump() for source in sources]

    try:
        return RoadmapResult.model_validate(payload)
    except ValidationError as exc:
        logger.error(f"Roadmap schema violation: {exc.error_count()} error(s)")
        raise MalformedResponse(f"Response does not match the roadmap shape: {exc}") from exc
