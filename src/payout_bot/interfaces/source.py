"""EventSource protocol - queries the subgraph for recent winning tickets."""

from __future__ import annotations

from typing import Protocol

from payout_bot.models.events import TicketEvent


class EventSource(Protocol):
    """Fetches the most recent winning ticket events."""

    async def fetch_latest(self, limit: int) -> list[TicketEvent]:
        """Return up to ``limit`` events ordered by timestamp, newest first.

        Raises EventSourceError when the page cannot be fetched.
        """
        ...
