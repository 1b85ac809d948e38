"""Response schemas for the FactCheck API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ── Upstream response schema ───────────────────────────────────────────
# Sent to the generation API to constrain its output.

FACT_CHECK_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "score": {
            "type": "number",
            "description": "The confidence score from 0 to 100, where 100 is fully verifiable/true "
            "and 0 is false/unsupported.",
        },
        "summary": {
            "type": "string",
            "description": "A one-sentence, unbiased summary of the fact-check result.",
        },
        "sources": {
            "type": "array",
            "items": {
                "type": "string",
                "description": "A highly trusted URL that verifies or contradicts the claim.",
            },
            "description": "A list of at least two URLs from trusted sources.",
        },
    },
    "required": ["score", "summary", "sources"],
}


# ── Top-level responses ────────────────────────────────────────────────

class FactCheckResult(BaseModel):
    """Normalised fact-check result returned to the extension.

    Strict so that ``"85"`` or ``true`` as a score is a shape mismatch rather
    than something silently coerced.
    """

    model_config = ConfigDict(strict=True)

    score: float = Field(ge=0, le=100, description="Reliability score, 0–100.")
    summary: str = Field(description="One-sentence summary of the fact-check.")
    sources: list[str] = Field(description="URLs that verify or contradict the claim.")


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
    raw_ai_response: str | None = None
