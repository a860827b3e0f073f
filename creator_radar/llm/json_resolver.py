"""Tolerant JSON extraction from provider answers.

Providers are asked for strict JSON but may wrap it in prose or markdown
fences. The resolver takes the span between the first `{` and the last `}`
and parses it. An unrelated brace before the real payload will misparse;
providers that support a structured-output mode should use it and treat
this as the fallback.
"""

import json
from typing import Any, Optional

import structlog

from creator_radar.errors import MalformedResponse

logger = structlog.get_logger(__name__)


def extract_json_from_text(raw: str) -> Any:
    """Parse the outermost `{...}` span of a string.

    Raises:
        MalformedResponse: If no braces are present or the span is not JSON.
    """
    first_brace = raw.find("{")
    last_brace = raw.rfind("}")
    if first_brace == -1 or last_brace == -1:
        raise MalformedResponse("No JSON object found in response.")

    candidate = raw[first_brace:last_brace + 1]
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.debug(
            "json_candidate_parse_failed",
            error=str(e),
            preview=candidate[:200],
        )
        raise MalformedResponse(f"Invalid JSON in response: {e}") from e


def resolve_json_candidate(payload: Any) -> Optional[Any]:
    """Turn a provider answer into a structured object.

    - None or empty string: no candidate (None).
    - str: brace-scanned and parsed (may raise MalformedResponse).
    - dict / list: returned unchanged (same object).
    - anything else: no candidate.
    """
    if payload is None or payload == "":
        return None
    if isinstance(payload, str):
        return extract_json_from_text(payload)
    if isinstance(payload, (dict, list)):
        return payload
    return None
