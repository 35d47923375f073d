"""Notification dispatcher - fans one message out to every configured destination."""

from __future__ import annotations

import logging
from typing import Sequence

from payout_bot.interfaces.notifier import Notifier
from payout_bot.models.config import BotConfig
from payout_bot.models.events import TicketEvent
from payout_bot.models.records import DispatchResult, MessageData
from payout_bot.notify.discord import DiscordWebhookNotifier
from payout_bot.notify.twitter import TwitterNotifier

log = logging.getLogger(__name__)


def build_notifiers(cfg: BotConfig) -> list[Notifier]:
    """Create a notifier for each destination whose credentials are set."""
    notifiers: list[Notifier] = []
    if cfg.twitter.enabled:
        notifiers.append(TwitterNotifier(cfg.twitter, timeout=cfg.http_timeout))
    if cfg.discord.enabled:
        notifiers.append(DiscordWebhookNotifier(cfg.discord, timeout=cfg.http_timeout))
    return notifiers


class NotificationDispatcher:
    """Sends each message to all notifiers, one after another.

    A failing destination never prevents the others from being tried.
    """

    def __init__(self, notifiers: Sequence[Notifier]) -> None:
        self._notifiers = list(notifiers)

    @property
    def destinations(self) -> list[str]:
        return [n.name for n in self._notifiers]

    async def dispatch(self, event: TicketEvent, message: MessageData) -> list[DispatchResult]:
        results: list[DispatchResult] = []
        for notifier in self._notifiers:
            try:
                result = await notifier.send(event, message)
            except Exception as exc:
                log.error(
                    "%s notifier raised for tx %s: %s",
                    notifier.name, event.transaction, exc, exc_info=True,
                )
                result = DispatchResult(
                    destination=notifier.name,
                    transaction=event.transaction,
                    success=False,
                    error=str(exc),
                )
            if not result.success:
                log.warning(
                    "%s notification failed for tx %s: %s",
                    result.destination, event.transaction, result.error,
                )
            results.append(result)
        return results
