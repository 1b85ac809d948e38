"""Normalisation of the raw model reply into a fact-check result."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from schemas.response import FactCheckResult

logger = logging.getLogger("factcheck.engine.sanitizer")

_LEADING_FENCE = re.compile(r"^```json\s*")
_TRAILING_FENCE = re.compile(r"\s*```$")

MALFORMED_JSON = "AI returned malformed JSON."
SCHEMA_MISMATCH = "AI returned JSON that does not match the fact-check schema."


class MalformedOutputError(Exception):
    """The model reply could not be turned into a fact-check result.

    ``raw`` holds the trimmed reply so callers can surface it for diagnosis.
    """

    def __init__(self, details: str, raw: str) -> None:
        super().__init__(details)
        self.details = details
        self.raw = raw


def strip_json_fences(raw: str) -> str:
    """Remove a leading ```` ```json ```` and a trailing ```` ``` ```` fence, if present."""
    return _TRAILING_FENCE.sub("", _LEADING_FENCE.sub("", raw))


def parse_fact_check(raw: str) -> dict[str, Any]:
    """Trim, unfence, parse and validate a model reply.

    Returns the parsed object unchanged once it has passed validation.
    Raises ``MalformedOutputError`` when the text is not JSON or its shape
    does not match ``FactCheckResult``.
    """
    trimmed = raw.strip()

    try:
        data = json.loads(strip_json_fences(trimmed))
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse JSON response from model: %s\nRaw: %s", exc, trimmed[:500])
        raise MalformedOutputError(MALFORMED_JSON, trimmed) from exc

    if not isinstance(data, dict) or isinstance(data.get("score"), bool):
        logger.error("Model reply has the wrong shape: %s", trimmed[:500])
        raise MalformedOutputError(SCHEMA_MISMATCH, trimmed)

    try:
        FactCheckResult.model_validate(data)
    except ValidationError as exc:
        logger.error("Model reply failed schema validation: %s\nRaw: %s", exc, trimmed[:500])
        raise MalformedOutputError(SCHEMA_MISMATCH, trimmed) from exc

    return data
