"""Fee-derived minutes - backs out transcoded minutes from a ticket's face value."""

from __future__ import annotations

import math

from payout_bot.models.config import PIXELS_PER_MINUTE


def estimate_minutes(
    face_value: str | float,
    face_value_usd: str | float,
    price_per_pixel: float,
    pixels_per_minute: int = PIXELS_PER_MINUTE,
) -> float:
    """Estimate the minutes of video a ticket paid for.

    ``price_per_pixel`` is in ETH. The ETH/USD rate implied by the ticket
    converts it to a USD price per pixel, then the USD face value is divided
    out into pixels and minutes. Degenerate inputs (zero values, NaN,
    infinities) yield 0.0.
    """
    try:
        eth_usd_rate = float(face_value) / float(face_value_usd)
        usd_price_per_pixel = price_per_pixel / eth_usd_rate
        minutes = float(face_value_usd) / usd_price_per_pixel / pixels_per_minute
    except (ZeroDivisionError, ValueError, TypeError):
        return 0.0

    if not math.isfinite(minutes):
        return 0.0
    return minutes or 0.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up."""
    return int(math.floor(value + 0.5))
