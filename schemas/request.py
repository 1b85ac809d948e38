"""Request schemas for the FactCheck API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class FactCheckRequest(BaseModel):
    """Payload sent by the browser extension relay.

    ``text`` is left loosely typed so an absent, empty or non-string value
    reaches the route and gets the 400 payload instead of a 422.
    """

    text: Any = Field(
        default=None,
        description="The passage the user selected on the page.",
    )

    def selected_text(self) -> str | None:
        """Return the text when it is a non-empty string, else ``None``.

        Whitespace-only text is passed through; only ``""`` counts as empty.
        """
        if isinstance(self.text, str) and self.text != "":
            return self.text
        return None
