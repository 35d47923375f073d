"""Best-effort enrichment protocols - name resolution and pricing."""

from __future__ import annotations

from typing import Protocol

from payout_bot.models.records import BestEffort, Identity


class NameResolver(Protocol):
    """Resolves an orchestrator address to a display name and avatar."""

    async def resolve(self, address: str, default_name: str) -> BestEffort[Identity]:
        """Never raises; falls back to ``default_name`` with no image."""
        ...


class PriceSource(Protocol):
    """Looks up the price per pixel (in ETH) an orchestrator charges."""

    async def price_per_pixel(self, address: str) -> BestEffort[float]:
        """Never raises; falls back to the configured default."""
        ...
