"""Data models for the payout bot."""

from payout_bot.models.events import TicketEvent, TicketKind
from payout_bot.models.records import (
    BestEffort,
    DispatchResult,
    Identity,
    MessageData,
    RunReport,
    Selection,
)
from payout_bot.models.config import BotConfig, DiscordConfig, TwitterConfig

__all__ = [
    "TicketEvent", "TicketKind",
    "BestEffort", "DispatchResult", "Identity", "MessageData", "RunReport", "Selection",
    "BotConfig", "DiscordConfig", "TwitterConfig",
]
