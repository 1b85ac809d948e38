"""Shared test setup."""

import os

# The API key is required at import time; tests never reach the real service.
os.environ.setdefault("GEMINI_API_KEY", "test-key")
os.environ.setdefault("LLM_PROVIDER", "gemini")
