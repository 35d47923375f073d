"""Tests 8-17: Minutes estimation and message formatting."""

from __future__ import annotations

import math

import pytest

from payout_bot.models.config import DEFAULT_AI_BROADCASTERS, DEFAULT_PRICE_PER_PIXEL
from payout_bot.models.events import TicketKind
from payout_bot.tickets.estimator import estimate_minutes, round_half_up
from payout_bot.tickets.formatter import (
    CARD_COLORS,
    build_message_data,
    elide_address,
    format_eth,
    format_message,
    format_usd,
)
from tests.factories import AI_BROADCASTER, ORCHESTRATOR, TX_HASH, make_ticket_event
from tests.mocks import MockPriceSource, MockResolver

ENS_NAME = "cadams.eth"
ENS_AVATAR = "https://gateway.ipfs.io/ipfs/QmV1wrG2srGPFTrkNZtQH8z3CKcDKS1eMFroqcYkBaFX3Q"


# ── Test 8: Reference ticket estimate ────────────────────────────


def test_estimate_reference_ticket():
    minutes = estimate_minutes(
        "0.07597039584", "212.6010755246367967983797350406091", DEFAULT_PRICE_PER_PIXEL,
    )
    assert minutes == pytest.approx(21134.67, abs=0.01)
    assert round_half_up(minutes) == 21135


# ── Test 9: Degenerate inputs give zero ──────────────────────────


@pytest.mark.parametrize(
    "face_value, face_value_usd, price",
    [
        ("0.1", "0", DEFAULT_PRICE_PER_PIXEL),
        ("0", "100", DEFAULT_PRICE_PER_PIXEL),
        ("0", "0", DEFAULT_PRICE_PER_PIXEL),
        ("0.1", "100", 0.0),
        ("nan", "100", DEFAULT_PRICE_PER_PIXEL),
        ("not-a-number", "100", DEFAULT_PRICE_PER_PIXEL),
    ],
)
def test_estimate_degenerate_inputs(face_value, face_value_usd, price):
    minutes = estimate_minutes(face_value, face_value_usd, price)
    assert minutes == 0.0
    assert not math.isnan(minutes)


# ── Test 10: Display formatting ──────────────────────────────────


def test_display_formatting():
    assert format_eth("0.07597039584") == "0.0760"
    assert format_usd("212.6010755246367967983797350406091") == "212.60"
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4999) == 2


@pytest.mark.parametrize(
    "value, eth, usd",
    [
        # Exact binary ties round up
        ("10.125", "10.1250", "10.13"),
        ("0.03125", "0.0313", "0.03"),
        ("0.00005", "0.0001", "0.00"),
        # 1.005 is stored just below the tie
        ("1.005", "1.0050", "1.00"),
    ],
)
def test_display_rounding_ties(value, eth, usd):
    assert format_eth(value) == eth
    assert format_usd(value) == usd


# ── Test 11: Address elision ─────────────────────────────────────


def test_elide_address():
    assert elide_address(ORCHESTRATOR) == "0xa678c0…439B5b"
    assert elide_address("0x1234") == "0x1234"
    assert elide_address("0x12345678") == "0x123456…"
    assert elide_address("0x123456789abcdef") == "0x123456…"


# ── Test 12: Transcoding template ────────────────────────────────


def test_transcoding_message():
    event = make_ticket_event()

    message = format_message(event, ai_broadcasters=DEFAULT_AI_BROADCASTERS)

    assert message.kind == TicketKind.TRANSCODING
    assert message.card_color == CARD_COLORS[TicketKind.TRANSCODING]
    assert message.name == "0xa678c0…439B5b"
    assert message.image is None
    assert message.twitter_status == (
        "Livepeer orchestrator 0xa678c0…439B5b just earned 0.0760 ETH ($212.60) "
        "transcoding approximately 21,135 minutes of video. "
        f"https://arbiscan.io/tx/{TX_HASH}"
    )
    assert message.discord_description == (
        f"[**0xa678c0…439B5b**](https://explorer.livepeer.org/accounts/{ORCHESTRATOR}/campaign) "
        "just earned **0.0760 ETH ($212.60)** transcoding approximately 21,135 minutes of video."
    )


# ── Test 13: AI template ─────────────────────────────────────────


def test_ai_message():
    event = make_ticket_event(sender=AI_BROADCASTER)

    message = format_message(
        event, name=ENS_NAME, image=ENS_AVATAR, ai_broadcasters=DEFAULT_AI_BROADCASTERS,
    )

    assert message.kind == TicketKind.AI
    assert message.card_color == CARD_COLORS[TicketKind.AI]
    assert message.twitter_status == (
        f"Livepeer orchestrator {ENS_NAME} just earned 0.0760 ETH ($212.60) "
        f"performing AI inference on the AI subnet. https://arbiscan.io/tx/{TX_HASH}"
    )
    assert message.discord_description == (
        f"[**{ENS_NAME}**](https://explorer.livepeer.org/accounts/{ORCHESTRATOR}/campaign) "
        "just earned **0.0760 ETH ($212.60)** performing AI inference on the "
        "[**AI subnet**](https://docs.livepeer.ai/ai/introduction)."
    )


# ── Test 14: Sender match is case-insensitive ────────────────────


def test_ai_match_ignores_case():
    event = make_ticket_event(sender=AI_BROADCASTER.lower())
    assert format_message(event, ai_broadcasters=[AI_BROADCASTER.upper()]).kind == TicketKind.AI

    other = make_ticket_event(sender="0x" + "0" * 40)
    assert format_message(other, ai_broadcasters=[AI_BROADCASTER]).kind == TicketKind.TRANSCODING


# ── Test 15: Resolved identity replaces the elided address ───────


async def test_build_message_uses_resolved_identity():
    resolver = MockResolver({ORCHESTRATOR: (ENS_NAME, ENS_AVATAR)})
    prices = MockPriceSource()

    message = await build_message_data(make_ticket_event(), resolver, prices)

    assert message.name == ENS_NAME
    assert message.image == ENS_AVATAR
    assert message.twitter_status.startswith(f"Livepeer orchestrator {ENS_NAME} just earned")
    assert resolver.calls == [ORCHESTRATOR]
    assert prices.calls == [ORCHESTRATOR]


# ── Test 16: Failed lookups fall back to defaults ────────────────


async def test_build_message_survives_enrichment_failures():
    message = await build_message_data(
        make_ticket_event(),
        MockResolver(fail=True),
        MockPriceSource(price=DEFAULT_PRICE_PER_PIXEL, fail=True),
    )

    assert message.name == "0xa678c0…439B5b"
    assert message.image is None
    assert "21,135 minutes" in message.twitter_status


# ── Test 17: No resolver configured ──────────────────────────────


async def test_build_message_without_resolver():
    message = await build_message_data(make_ticket_event(), None, MockPriceSource())
    assert message.name == "0xa678c0…439B5b"
