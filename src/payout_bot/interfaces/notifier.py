"""Notifier protocol - posts one payout notification to one destination."""

from __future__ import annotations

from typing import Protocol

from payout_bot.models.events import TicketEvent
from payout_bot.models.records import DispatchResult, MessageData


class Notifier(Protocol):
    """A single outbound destination (Discord webhook, Twitter, ...)."""

    name: str

    async def send(self, event: TicketEvent, message: MessageData) -> DispatchResult:
        """Post the notification. Failures are returned, not raised."""
        ...
