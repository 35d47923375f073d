"""Subgraph integration - winning ticket queries against The Graph."""

from payout_bot.subgraph.source import GraphEventSource

__all__ = ["GraphEventSource"]
