"""Extension background relay — selection → proxy → stored result + badge."""

from __future__ import annotations

import logging
from typing import Any, Callable

import httpx
from pydantic_settings import BaseSettings, SettingsConfigDict

from extension.badge import BadgeIndicator, BadgeState
from extension.state import (
    ANALYSIS_RESULT,
    IS_ANALYZING,
    ExtensionState,
    StateStore,
)

logger = logging.getLogger("factcheck.extension.relay")

FACT_CHECK_MENU_ID = "aiFactCheck"


class RelaySettings(BaseSettings):
    """Extension-side configuration; it never sees the generation API key."""

    model_config = SettingsConfigDict(env_prefix="FACTCHECK_", env_file=".env", extra="ignore")

    proxy_endpoint: str = "http://localhost:3000/fact-check"


class ProxyError(Exception):
    """The proxy answered with a non-success HTTP status."""


def context_menu_item() -> dict[str, Any]:
    """Menu entry registered when the extension is installed or updated."""
    return {
        "id": FACT_CHECK_MENU_ID,
        "title": "Fact-Check Selected Text",
        "contexts": ["selection"],
    }


class FactCheckRelay:
    """Runs one analysis cycle per context-menu click.

    Every cycle gets a request id from a monotonically increasing counter.
    When a cycle resolves after a newer one has been dispatched its outcome
    is dropped, so the most recent request always owns the stored state.
    """

    def __init__(
        self,
        store: StateStore | None = None,
        badge: BadgeIndicator | None = None,
        *,
        proxy_endpoint: str | None = None,
        client: httpx.AsyncClient | None = None,
        open_popup: Callable[[], Any] | None = None,
    ) -> None:
        self.store = store or StateStore()
        self.badge = badge or BadgeIndicator()
        self.proxy_endpoint = proxy_endpoint or RelaySettings().proxy_endpoint
        self._client = client or httpx.AsyncClient()
        self._owns_client = client is None
        self._open_popup = open_popup
        self._latest_request_id = 0

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> FactCheckRelay:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @property
    def latest_request_id(self) -> int:
        return self._latest_request_id

    async def on_context_menu_clicked(
        self,
        menu_item_id: str,
        selection_text: str | None,
        tab_id: int,
    ) -> ExtensionState | None:
        """Handle a menu click; returns the state this cycle stored, if any."""
        if menu_item_id != FACT_CHECK_MENU_ID or not selection_text:
            return None
        return await self.analyze(selection_text.strip(), tab_id)

    async def analyze(self, text: str, tab_id: int) -> ExtensionState | None:
        """Run Idle → Analyzing → Succeeded/Failed for *text*.

        Returns ``None`` when the cycle was superseded before it resolved.
        """
        self._latest_request_id += 1
        request_id = self._latest_request_id

        state = ExtensionState().start(text, request_id)
        await self.store.set(state.to_storage())
        self.badge.show(BadgeState.ANALYZING, tab_id)

        try:
            result = await self._request_analysis(text)
        except Exception as exc:
            logger.error("AI analysis failed (proxy/network error): %s", exc)
            state, badge_state = state.fail(), BadgeState.ERROR
        else:
            state, badge_state = state.succeed(result), BadgeState.SUCCESS

        if request_id != self._latest_request_id:
            logger.info(
                "Discarding result of request %d; request %d is newer.",
                request_id,
                self._latest_request_id,
            )
            return None

        await self.store.set(
            {ANALYSIS_RESULT: state.analysis_result, IS_ANALYZING: state.is_analyzing}
        )
        self.badge.show(badge_state, tab_id)

        if badge_state is BadgeState.SUCCESS and self._open_popup is not None:
            self._open_popup()
        return state

    async def _request_analysis(self, text: str) -> dict[str, Any]:
        logger.info("Sending text to proxy for analysis: %r...", text[:50])

        response = await self._client.post(self.proxy_endpoint, json={"text": text})
        if not response.is_success:
            raise ProxyError(
                f"Proxy service failed: {response.status_code} {response.reason_phrase}. "
                f"Details: {response.text[:100]}"
            )
        result = response.json()
        if not isinstance(result, dict):
            raise ValueError(f"Proxy returned a JSON {type(result).__name__}, expected an object.")
        return result
