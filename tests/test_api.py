"""Tests for the FastAPI routes (mocked generation API)."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from main import app


client = TestClient(app)

FLAT_EARTH = {
    "score": 2,
    "summary": "Contradicted by scientific consensus.",
    "sources": ["https://nasa.gov/earth"],
}


@pytest.fixture
def upstream():
    """Patch the gateway call; tests set ``return_value`` or ``side_effect``."""
    with patch("engine.fact_checker.generate_fact_check", new_callable=AsyncMock) as mock:
        mock.return_value = json.dumps(FLAT_EARTH)
        yield mock


class TestHealthEndpoint:
    def test_health(self):
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["engine"] == "factcheck"
        assert data["model"]


class TestFactCheckEndpoint:
    def test_flat_earth_scenario(self, upstream):
        resp = client.post("/fact-check", json={"text": "The Earth is flat."})
        assert resp.status_code == 200
        assert resp.json() == FLAT_EARTH

    def test_prompt_embeds_text_verbatim(self, upstream):
        client.post("/fact-check", json={"text": 'He said "{text}" twice.'})
        prompt = upstream.await_args.args[0]
        assert 'The text to analyze is: "He said "{text}" twice."' in prompt
        assert "factual accuracy, bias, and context" in prompt

    def test_fenced_reply_parses_like_bare_reply(self, upstream):
        upstream.return_value = "\n```json\n" + json.dumps(FLAT_EARTH) + "\n```\n"
        fenced = client.post("/fact-check", json={"text": "The Earth is flat."})

        upstream.return_value = json.dumps(FLAT_EARTH)
        bare = client.post("/fact-check", json={"text": "The Earth is flat."})

        assert fenced.status_code == bare.status_code == 200
        assert fenced.json() == bare.json()

    def test_extra_fields_forwarded_verbatim(self, upstream):
        upstream.return_value = json.dumps({**FLAT_EARTH, "model_note": "kept"})
        resp = client.post("/fact-check", json={"text": "The Earth is flat."})
        assert resp.status_code == 200
        assert resp.json()["model_note"] == "kept"

    def test_upstream_called_once(self, upstream):
        client.post("/fact-check", json={"text": "Water boils at 100 C at sea level."})
        assert upstream.await_count == 1


class TestInputValidation:
    @pytest.mark.parametrize(
        "body",
        [{"text": ""}, {}, {"text": None}, {"text": 42}, ["not", "an", "object"]],
    )
    def test_missing_or_empty_text_rejected(self, upstream, body):
        resp = client.post("/fact-check", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"error": "No text provided for fact-checking."}
        upstream.assert_not_awaited()

    def test_whitespace_text_forwarded(self, upstream):
        resp = client.post("/fact-check", json={"text": "   "})
        assert resp.status_code == 200
        assert upstream.await_count == 1
        assert 'The text to analyze is: "   "' in upstream.await_args.args[0]

    def test_no_body_rejected(self, upstream):
        resp = client.post("/fact-check")
        assert resp.status_code == 400
        assert resp.json() == {"error": "No text provided for fact-checking."}

    def test_non_json_body_rejected(self, upstream):
        resp = client.post(
            "/fact-check",
            content=b"text=hello",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "No text provided for fact-checking."


class TestErrorPayloads:
    def test_prose_reply_returns_raw_text(self, upstream):
        upstream.return_value = "  I think the Earth is round.  \n"
        resp = client.post("/fact-check", json={"text": "The Earth is flat."})
        assert resp.status_code == 500
        data = resp.json()
        assert data["error"] == "Internal server error during AI analysis."
        assert data["details"] == "AI returned malformed JSON."
        assert data["raw_ai_response"] == "I think the Earth is round."

    def test_schema_mismatch_is_malformed_output(self, upstream):
        upstream.return_value = json.dumps({"score": "high", "summary": "x", "sources": []})
        resp = client.post("/fact-check", json={"text": "The Earth is flat."})
        assert resp.status_code == 500
        data = resp.json()
        assert data["error"] == "Internal server error during AI analysis."
        assert "schema" in data["details"]
        assert data["raw_ai_response"] == upstream.return_value

    def test_upstream_failure_surfaces_message(self, upstream):
        upstream.side_effect = RuntimeError("quota exceeded")
        resp = client.post("/fact-check", json={"text": "The Earth is flat."})
        assert resp.status_code == 500
        assert resp.json() == {
            "error": "Internal server error during AI analysis.",
            "details": "quota exceeded",
        }


class TestCors:
    def test_any_origin_allowed(self, upstream):
        resp = client.post(
            "/fact-check",
            json={"text": "The Earth is flat."},
            headers={"Origin": "chrome-extension://abcdefghijklmnop"},
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] in (
            "*",
            "chrome-extension://abcdefghijklmnop",
        )

    def test_preflight(self):
        resp = client.options(
            "/fact-check",
            headers={
                "Origin": "chrome-extension://abcdefghijklmnop",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "content-type",
            },
        )
        assert resp.status_code == 200


class TestErrorLogging:
    def test_upstream_failure_logged_once_without_traceback(self, upstream, caplog):
        upstream.side_effect = RuntimeError("quota exceeded")
        with caplog.at_level("ERROR", logger="factcheck"):
            client.post("/fact-check", json={"text": "The Earth is flat."})
        records = [r for r in caplog.records if r.name == "factcheck"]
        assert len(records) == 1
        assert "quota exceeded" in records[0].getMessage()
        assert records[0].exc_info is None
