"""FactCheck configuration — loaded from environment / .env file."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # --- LLM provider --------------------------------------------------
    llm_provider: str = "gemini"  # "gemini" | "local"

    # Gemini (OpenAI-compatible endpoint). Required: startup fails without it.
    gemini_api_key: str = Field(..., min_length=1)
    gemini_model: str = "gemini-2.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"

    # Local / Ollama
    local_llm_base_url: str = "http://localhost:11434/v1"
    local_llm_model: str = "llama3"

    # --- Server ---------------------------------------------------------
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "info"
    allowed_origins: str = "*"  # comma-separated origins


settings = Settings()
