"""Thin wrapper around the generation API (Gemini / local OpenAI-compatible)."""

from __future__ import annotations

import logging
from typing import Any

from openai import AsyncOpenAI

from config import settings
from schemas.response import FACT_CHECK_RESPONSE_SCHEMA

logger = logging.getLogger("factcheck.llm")


def _build_client() -> tuple[AsyncOpenAI, str]:
    """Return (async_client, model_name) based on the configured provider.

    SDK-level retries are switched off; a failed call surfaces immediately.
    """
    provider = settings.llm_provider.lower()

    if provider == "local":
        client = AsyncOpenAI(
            base_url=settings.local_llm_base_url,
            api_key="not-needed",
            max_retries=0,
        )
        model = settings.local_llm_model
    else:  # default: gemini
        client = AsyncOpenAI(
            base_url=settings.gemini_base_url,
            api_key=settings.gemini_api_key,
            max_retries=0,
        )
        model = settings.gemini_model

    return client, model


_client, _model = _build_client()


class LLMError(Exception):
    """Raised when the generation API returns no usable content."""


def model_name() -> str:
    return _model


async def generate_fact_check(prompt: str) -> str:
    """Send *prompt* and return the raw text of the schema-constrained reply.

    Parameters
    ----------
    prompt : str
        The complete fact-check instruction, user text included.

    Returns
    -------
    str
        Raw completion text, expected to be a JSON document matching
        ``FACT_CHECK_RESPONSE_SCHEMA`` (possibly wrapped in markdown fences).
    """
    kwargs: dict[str, Any] = {
        "model": _model,
        "messages": [{"role": "user", "content": prompt}],
        "response_format": {
            "type": "json_schema",
            "json_schema": {
                "name": "fact_check_result",
                "schema": FACT_CHECK_RESPONSE_SCHEMA,
            },
        },
    }

    try:
        response = await _client.chat.completions.create(**kwargs)
    except Exception as exc:
        logger.exception("LLM call failed: %s", exc)
        raise

    content = response.choices[0].message.content
    if content is None:
        raise LLMError("LLM returned empty content.")
    return content
