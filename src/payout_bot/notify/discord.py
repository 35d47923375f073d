"""Discord webhook notifier - posts a payout embed."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import httpx

from payout_bot.models.config import DiscordConfig
from payout_bot.models.events import TicketEvent
from payout_bot.models.records import DispatchResult, MessageData
from payout_bot.tickets.formatter import ARBISCAN_TX_URL

log = logging.getLogger(__name__)

EMBED_TITLE = "Orchestrator Payout"


def iso_timestamp(timestamp: int) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2022-04-29T20:28:51.000Z."""
    dt = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def build_payload(
    event: TicketEvent, message: MessageData, cfg: DiscordConfig,
) -> dict:
    embed: dict = {
        "color": message.card_color,
        "title": EMBED_TITLE,
        "description": message.discord_description,
        "timestamp": iso_timestamp(event.timestamp),
        "url": ARBISCAN_TX_URL.format(tx=event.transaction),
    }
    if message.image:
        embed["thumbnail"] = {"url": message.image}
    return {
        "username": cfg.username,
        "avatar_url": cfg.avatar_url,
        "embeds": [embed],
    }


class DiscordWebhookNotifier:
    """Posts embeds to a Discord channel webhook."""

    name = "discord"

    def __init__(
        self,
        cfg: DiscordConfig,
        timeout: float = 15,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._cfg = cfg
        self._timeout = timeout
        self._transport = transport

    async def send(self, event: TicketEvent, message: MessageData) -> DispatchResult:
        payload = build_payload(event, message, self._cfg)
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport,
            ) as client:
                resp = await client.post(self._cfg.webhook_url, json=payload)
                resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            return DispatchResult(
                destination=self.name,
                transaction=event.transaction,
                success=False,
                status_code=exc.response.status_code,
                error=f"webhook HTTP {exc.response.status_code}",
            )
        except httpx.HTTPError as exc:
            return DispatchResult(
                destination=self.name,
                transaction=event.transaction,
                success=False,
                error=f"webhook request failed: {exc!r}",
            )

        log.info("Discord notified for tx %s", event.transaction)
        return DispatchResult(
            destination=self.name,
            transaction=event.transaction,
            success=True,
            status_code=resp.status_code,
        )
