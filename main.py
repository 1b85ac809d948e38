"""FactCheck — AI fact-checking proxy for the browser extension.

FastAPI application entry-point.
Hides the generation API credential from the extension and normalises the
model's reply to ``{score, summary, sources}``.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from engine.fact_checker import run_fact_check
from engine.sanitizer import MalformedOutputError
from schemas.request import FactCheckRequest
from schemas.response import ErrorResponse, FactCheckResult
from services.llm_service import model_name

# ── Logging ────────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s | %(name)-30s | %(levelname)-7s | %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger("factcheck")

VERSION = "1.0.0"
FACT_CHECK_PATH = "/fact-check"
NO_TEXT_ERROR = "No text provided for fact-checking."
ANALYSIS_ERROR = "Internal server error during AI analysis."


# ── Lifespan ───────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: ARG001
    logger.info(
        "Fact-Checker Proxy running on http://%s:%d — provider=%s model=%s",
        settings.host,
        settings.port,
        settings.llm_provider,
        model_name(),
    )
    yield
    logger.info("Fact-Checker Proxy shutting down.")


# ── App ────────────────────────────────────────────────────────────────

app = FastAPI(
    title="FactCheck",
    description="Proxy between the FactCheck browser extension and the generation API.",
    version=VERSION,
    lifespan=lifespan,
)

# Parse allowed_origins (comma-separated string → list)
_origins = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, error: str, **extra: str) -> JSONResponse:
    payload = ErrorResponse(error=error, **extra)
    return JSONResponse(status_code=status_code, content=payload.model_dump(exclude_none=True))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # An unreadable body on the fact-check route counts as "no text".
    if request.url.path == FACT_CHECK_PATH:
        return _error(400, NO_TEXT_ERROR)
    return await request_validation_exception_handler(request, exc)


# ── Routes ─────────────────────────────────────────────────────────────

@app.get("/health")
async def health():
    return {
        "status": "ok",
        "engine": "factcheck",
        "version": VERSION,
        "provider": settings.llm_provider,
        "model": model_name(),
    }


@app.post(
    FACT_CHECK_PATH,
    response_model=FactCheckResult,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Fact-check a text selection",
    description="Sends the selected text to the generation API and returns a reliability "
    "score, a one-sentence summary and supporting source URLs.",
)
async def fact_check(payload: FactCheckRequest | None = None):
    text = payload.selected_text() if payload is not None else None
    if text is None:
        return _error(400, NO_TEXT_ERROR)

    try:
        result = await run_fact_check(text)
    except MalformedOutputError as exc:
        return _error(500, ANALYSIS_ERROR, details=exc.details, raw_ai_response=exc.raw)
    except Exception as exc:
        # Upstream call tracebacks are logged by the gateway.
        logger.error("Gemini API or proxy error: %s", exc)
        return _error(500, ANALYSIS_ERROR, details=str(exc))

    return JSONResponse(content=result)


# ── Dev runner ─────────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
        reload=True,
    )
