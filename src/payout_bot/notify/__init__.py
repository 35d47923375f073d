"""Outbound notifications - Discord webhook and Twitter."""

from payout_bot.notify.discord import DiscordWebhookNotifier
from payout_bot.notify.dispatcher import NotificationDispatcher, build_notifiers
from payout_bot.notify.twitter import TwitterNotifier

__all__ = [
    "DiscordWebhookNotifier",
    "NotificationDispatcher",
    "TwitterNotifier",
    "build_notifiers",
]
