"""Extension state shared between the relay and the popup presenter."""

from __future__ import annotations

import asyncio
import copy
from dataclasses import dataclass, field
from typing import Any

# Storage keys, as written by the relay and read by the popup.
LAST_SELECTED_TEXT = "lastSelectedText"
ANALYSIS_RESULT = "analysisResult"
IS_ANALYZING = "isAnalyzing"
STATE_KEYS = (LAST_SELECTED_TEXT, ANALYSIS_RESULT, IS_ANALYZING)

CONNECTION_FAILED_SUMMARY = (
    "Could not connect to the fact-checking service. "
    "Please check your internet connection or try again later."
)


def failure_placeholder() -> dict[str, Any]:
    """Result stored when the proxy could not be reached or answered with an error."""
    return {
        "reliability_score": 0,
        "summary": CONNECTION_FAILED_SUMMARY,
        "sources": [],
    }


@dataclass(frozen=True)
class ExtensionState:
    """Immutable snapshot of one analysis cycle.

    Transitions return a new snapshot; nothing mutates in place.
    """

    last_selected_text: str | None = None
    analysis_result: dict[str, Any] | None = None
    is_analyzing: bool = False
    request_id: int = 0

    @property
    def is_idle(self) -> bool:
        return not self.is_analyzing and self.analysis_result is None

    def start(self, text: str, request_id: int) -> ExtensionState:
        return ExtensionState(
            last_selected_text=text,
            analysis_result=None,
            is_analyzing=True,
            request_id=request_id,
        )

    def succeed(self, result: dict[str, Any]) -> ExtensionState:
        return ExtensionState(
            last_selected_text=self.last_selected_text,
            analysis_result=result,
            is_analyzing=False,
            request_id=self.request_id,
        )

    def fail(self) -> ExtensionState:
        return self.succeed(failure_placeholder())

    def to_storage(self) -> dict[str, Any]:
        return {
            LAST_SELECTED_TEXT: self.last_selected_text,
            ANALYSIS_RESULT: self.analysis_result,
            IS_ANALYZING: self.is_analyzing,
        }

    @classmethod
    def from_storage(cls, data: dict[str, Any], request_id: int = 0) -> ExtensionState:
        return cls(
            last_selected_text=data.get(LAST_SELECTED_TEXT),
            analysis_result=data.get(ANALYSIS_RESULT),
            is_analyzing=bool(data.get(IS_ANALYZING, False)),
            request_id=request_id,
        )


@dataclass
class StateStore:
    """In-memory stand-in for the extension's local key-value storage.

    ``get`` and ``set`` each run as one transaction; values are deep-copied
    on the way in and out so callers never share mutable results.
    """

    _data: dict[str, Any] = field(default_factory=dict)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    async def get(self, keys: tuple[str, ...] | list[str] = STATE_KEYS) -> dict[str, Any]:
        async with self._lock:
            return {k: copy.deepcopy(self._data[k]) for k in keys if k in self._data}

    async def set(self, items: dict[str, Any]) -> None:
        async with self._lock:
            self._data.update(copy.deepcopy(items))

    async def snapshot(self) -> ExtensionState:
        return ExtensionState.from_storage(await self.get())
