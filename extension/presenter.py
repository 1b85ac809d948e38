"""Popup presenter, a pure function from ``ExtensionState`` to a view."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from urllib.parse import urlparse

from extension.state import ExtensionState

GREEN = "#4CAF50"
YELLOW = "#FFC107"
RED = "#F44336"
RING_TRACK = "#ddd"

UNVERIFIED_ICON = "❓"
UNVERIFIED_SCORE_TEXT = "--"
UNVERIFIED_SUMMARY = "The service could not verify this claim based on immediate search results."
NO_SOURCES_MESSAGE = "No specific sources were cited for this summary."
IDLE_MESSAGE = "Select text on a page and choose \"Fact-Check Selected Text\" to begin."
LOADING_MESSAGE = "Analyzing..."


class PopupMode(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    RESULTS = "results"


@dataclass(frozen=True)
class SourceLink:
    title: str
    url: str


@dataclass(frozen=True)
class ScoreRing:
    score: float | None
    color: str
    text: str
    icon: str | None = None

    @property
    def verified(self) -> bool:
        return self.icon is None

    @property
    def background(self) -> str:
        """CSS conic gradient: the ring fills to the score percentage."""
        fill = 0 if self.score is None else self.score
        return f"conic-gradient({self.color} {fill:g}%, {RING_TRACK} {fill:g}%)"


@dataclass(frozen=True)
class PopupView:
    mode: PopupMode
    message: str | None = None
    selected_text: str | None = None
    ring: ScoreRing | None = None
    summary: str | None = None
    sources: list[SourceLink] = field(default_factory=list)
    sources_empty_message: str | None = None

    @property
    def show_recheck(self) -> bool:
        return self.mode is not PopupMode.IDLE


def ring_color(score: float) -> str:
    """Green above 70, yellow above 40, red otherwise."""
    if score > 70:
        return GREEN
    if score > 40:
        return YELLOW
    return RED


def _result_score(result: dict[str, Any]) -> float | None:
    score = result.get("score", result.get("reliability_score"))
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return None
    return score


def score_ring(result: dict[str, Any]) -> ScoreRing:
    """Build the ring for *result*.

    A missing score and a score of exactly 0 both render as "unverified";
    the connection-failure placeholder stores 0 and must not show a 0% ring.
    """
    score = _result_score(result)
    if score is None or score == 0:
        return ScoreRing(score=None, color=YELLOW, text=UNVERIFIED_SCORE_TEXT, icon=UNVERIFIED_ICON)
    return ScoreRing(score=score, color=ring_color(score), text=f"{score:g}%")


def _source_link(source: Any) -> SourceLink | None:
    if isinstance(source, str):
        url = source
        title = urlparse(url).netloc or url
    elif isinstance(source, dict) and source.get("url"):
        url = str(source["url"])
        title = str(source.get("title") or urlparse(url).netloc or url)
    else:
        return None
    return SourceLink(title=title, url=url)


def source_links(result: dict[str, Any]) -> list[SourceLink]:
    raw = result.get("sources") or []
    links = (_source_link(s) for s in raw) if isinstance(raw, list) else ()
    return [link for link in links if link is not None]


def present(state: ExtensionState) -> PopupView:
    """Render *state* into the popup view.

    Loading wins over any stored result; with neither, the idle prompt shows.
    """
    if state.is_analyzing:
        return PopupView(mode=PopupMode.LOADING, message=LOADING_MESSAGE)

    result = state.analysis_result
    if result is None:
        return PopupView(mode=PopupMode.IDLE, message=IDLE_MESSAGE)
    if not isinstance(result, dict):
        result = {}

    ring = score_ring(result)
    summary = result.get("summary")
    if not ring.verified and not summary:
        summary = UNVERIFIED_SUMMARY

    sources = source_links(result)
    return PopupView(
        mode=PopupMode.RESULTS,
        selected_text=state.last_selected_text,
        ring=ring,
        summary=summary,
        sources=sources,
        sources_empty_message=None if sources else NO_SOURCES_MESSAGE,
    )


def render_text(view: PopupView) -> str:
    """Plain-text rendering of *view*, for terminals and logs."""
    if view.mode is not PopupMode.RESULTS:
        return view.message or ""

    ring = view.ring
    lines = []
    if view.selected_text:
        lines.append(f"\"{view.selected_text}\"")
    if ring is not None:
        label = f"{ring.icon} {ring.text}" if ring.icon else ring.text
        lines.append(f"Reliability: {label}")
    if view.summary:
        lines.append(view.summary)
    lines.append("Sources:")
    if view.sources:
        lines.extend(f"  {i}. {s.title} ({s.url})" for i, s in enumerate(view.sources, 1))
    else:
        lines.append(f"  {view.sources_empty_message}")
    return "\n".join(lines)
