"""Badge shown on the extension's toolbar icon."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger("factcheck.extension.badge")


class BadgeState(str, Enum):
    ANALYZING = "analyzing"
    SUCCESS = "success"
    ERROR = "error"


# state → (text, background colour)
BADGE_STYLES: dict[BadgeState, tuple[str, str]] = {
    BadgeState.ANALYZING: ("...", "#FF9800"),  # amber
    BadgeState.SUCCESS: ("✓", "#4CAF50"),  # green
    BadgeState.ERROR: ("ERR", "#F44336"),  # red
}


@dataclass
class BadgeIndicator:
    """Per-tab badge text and colour, as the browser would render them."""

    text: dict[int, str] = field(default_factory=dict)
    color: dict[int, str] = field(default_factory=dict)

    def show(self, state: BadgeState, tab_id: int) -> None:
        text, color = BADGE_STYLES[state]
        self.text[tab_id] = text
        self.color[tab_id] = color
        logger.debug("Badge for tab %d → %s (%s)", tab_id, text, color)

    def state_of(self, tab_id: int) -> BadgeState | None:
        current = (self.text.get(tab_id), self.color.get(tab_id))
        for state, style in BADGE_STYLES.items():
            if style == current:
                return state
        return None
