"""Fact-check orchestrator: prompt, generate, sanitise."""

from __future__ import annotations

import logging
import time
from typing import Any

from engine.sanitizer import parse_fact_check
from prompts.fact_check_prompt import build_fact_check_prompt
from services.llm_service import generate_fact_check

logger = logging.getLogger("factcheck.engine")


async def run_fact_check(text: str) -> dict[str, Any]:
    """Fact-check *text* with a single model call.

    Parameters
    ----------
    text : str
        The user-selected passage, embedded verbatim in the prompt.

    Returns
    -------
    dict
        The validated ``{score, summary, sources}`` object as the model sent it.

    Raises
    ------
    MalformedOutputError
        The reply was not JSON or did not match the result schema.
    Exception
        Any upstream failure from the generation API, unchanged.
    """
    t0 = time.perf_counter()
    logger.info("Fact-checking %d chars: %r", len(text), text[:50])

    raw = await generate_fact_check(build_fact_check_prompt(text))
    result = parse_fact_check(raw)

    elapsed = time.perf_counter() - t0
    logger.info("Fact-check complete in %.2fs — score %s/100", elapsed, result["score"])
    return result
