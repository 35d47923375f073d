"""Protocol interfaces for all payout_bot components."""

from payout_bot.interfaces.source import EventSource
from payout_bot.interfaces.store import CursorStore
from payout_bot.interfaces.enrich import NameResolver, PriceSource
from payout_bot.interfaces.notifier import Notifier

__all__ = [
    "EventSource",
    "CursorStore",
    "NameResolver", "PriceSource",
    "Notifier",
]
