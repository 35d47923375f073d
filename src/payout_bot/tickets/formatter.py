"""Message formatting - turns a ticket into tweet text and a Discord embed body."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable

from payout_bot.interfaces.enrich import NameResolver, PriceSource
from payout_bot.models.config import DEFAULT_PRICE_PER_PIXEL, PIXELS_PER_MINUTE
from payout_bot.models.events import TicketEvent, TicketKind
from payout_bot.models.records import Identity, MessageData
from payout_bot.tickets.estimator import estimate_minutes, round_half_up

log = logging.getLogger(__name__)

CARD_COLORS = {
    TicketKind.TRANSCODING: 0x00EB88,
    TicketKind.AI: 0x8A2BE2,
}

ARBISCAN_TX_URL = "https://arbiscan.io/tx/{tx}"
EXPLORER_ACCOUNT_URL = "https://explorer.livepeer.org/accounts/{address}/campaign"
AI_SUBNET_URL = "https://docs.livepeer.ai/ai/introduction"


def elide_address(address: str) -> str:
    """Shorten an address to its first 8 characters, an ellipsis, and the tail."""
    if len(address) <= 8:
        return address
    return f"{address[:8]}…{address[36:]}"


def classify(event: TicketEvent, ai_broadcasters: Iterable[str]) -> TicketKind:
    """AI tickets are those sent by a known AI broadcaster (case-insensitive)."""
    sender = event.sender.lower()
    if any(sender == b.lower() for b in ai_broadcasters):
        return TicketKind.AI
    return TicketKind.TRANSCODING


def _fixed(value: str | float, places: str) -> str:
    """Fixed-point text of the float's exact binary value, ties rounded up."""
    number = float(value)
    try:
        return str(Decimal(number).quantize(Decimal(places), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # Infinities and magnitudes beyond the decimal context
        return f"{number:.{len(places) - 2}f}"


def format_eth(value: str | float) -> str:
    return _fixed(value, "0.0001")


def format_usd(value: str | float) -> str:
    return _fixed(value, "0.01")


def format_minutes(minutes: float) -> str:
    return f"{round_half_up(minutes):,}"


def format_message(
    event: TicketEvent,
    name: str | None = None,
    image: str | None = None,
    price_per_pixel: float = DEFAULT_PRICE_PER_PIXEL,
    ai_broadcasters: Iterable[str] = (),
    pixels_per_minute: int = PIXELS_PER_MINUTE,
) -> MessageData:
    """Build the notification strings for a ticket.

    ``name`` defaults to the elided recipient address.
    """
    name = name or elide_address(event.recipient)
    kind = classify(event, ai_broadcasters)
    minutes = estimate_minutes(
        event.face_value, event.face_value_usd, price_per_pixel, pixels_per_minute,
    )

    eth = format_eth(event.face_value)
    usd = format_usd(event.face_value_usd)
    tx_url = ARBISCAN_TX_URL.format(tx=event.transaction)
    account_url = EXPLORER_ACCOUNT_URL.format(address=event.recipient)
    earned = f"just earned {eth} ETH (${usd})"
    earned_bold = f"just earned **{eth} ETH (${usd})**"

    if kind == TicketKind.AI:
        twitter_status = (
            f"Livepeer orchestrator {name} {earned} "
            f"performing AI inference on the AI subnet. {tx_url}"
        )
        discord_description = (
            f"[**{name}**]({account_url}) {earned_bold} "
            f"performing AI inference on the [**AI subnet**]({AI_SUBNET_URL})."
        )
    else:
        work = f"transcoding approximately {format_minutes(minutes)} minutes of video."
        twitter_status = f"Livepeer orchestrator {name} {earned} {work} {tx_url}"
        discord_description = f"[**{name}**]({account_url}) {earned_bold} {work}"

    return MessageData(
        name=name,
        image=image,
        minutes=minutes,
        twitter_status=twitter_status,
        discord_description=discord_description,
        card_color=CARD_COLORS[kind],
        kind=kind,
    )


async def build_message_data(
    event: TicketEvent,
    resolver: NameResolver | None,
    prices: PriceSource,
    ai_broadcasters: Iterable[str] = (),
    pixels_per_minute: int = PIXELS_PER_MINUTE,
) -> MessageData:
    """Resolve the orchestrator's identity and price, then format the message.

    Both lookups are best-effort, so this always completes.
    """
    default_name = elide_address(event.recipient)
    identity = Identity(name=default_name)
    if resolver is not None:
        resolved = await resolver.resolve(event.recipient, default_name)
        if resolved.error:
            log.warning("Name lookup failed for tx %s: %s", event.transaction, resolved.error)
        identity = resolved.value

    price = await prices.price_per_pixel(event.recipient)
    if price.error:
        log.warning(
            "Price lookup failed for tx %s, using default %g: %s",
            event.transaction, price.value, price.error,
        )

    return format_message(
        event,
        name=identity.name,
        image=identity.image,
        price_per_pixel=price.value,
        ai_broadcasters=ai_broadcasters,
        pixels_per_minute=pixels_per_minute,
    )
