"""Prompt sent to the generation API for a fact-check.

The model is also given ``FACT_CHECK_RESPONSE_SCHEMA`` through the API's
structured-output mode, so the prompt only has to describe the task.
"""

FACT_CHECK_PROMPT = (
    "Analyze the following user-selected text for factual accuracy, bias, and context. "
    "Search for reliable sources to verify the core claim. "
    "Your output MUST be in a valid JSON format following the provided schema. "
    'The text to analyze is: "{text}"'
)


def build_fact_check_prompt(text: str) -> str:
    """Embed *text* verbatim in the fact-check instruction."""
    return FACT_CHECK_PROMPT.replace("{text}", text)
