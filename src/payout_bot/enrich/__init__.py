"""Best-effort enrichment - ENS identities and orchestrator pricing."""

from payout_bot.enrich.ens import EnsNameResolver
from payout_bot.enrich.pricing import FixedPriceSource, HttpPriceSource

__all__ = ["EnsNameResolver", "FixedPriceSource", "HttpPriceSource"]
