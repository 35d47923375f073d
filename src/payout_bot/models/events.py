"""Ticket event models deserialized from the Livepeer subgraph."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TicketKind(str, Enum):
    """What kind of work a winning ticket paid for."""

    TRANSCODING = "transcoding"
    AI = "ai"


@dataclass(frozen=True)
class TicketEvent:
    """A winning ticket redeemed on the TicketBroker (winningTicketRedeemedEvents)."""

    timestamp: int  # unix seconds
    face_value: str  # ETH, decimal string
    face_value_usd: str  # USD, decimal string
    recipient: str  # orchestrator address
    sender: str  # broadcaster address
    transaction: str  # tx hash

    @classmethod
    def from_graph(cls, raw: dict) -> TicketEvent:
        """Build from the subgraph's nested ``{recipient: {id}, ...}`` shape."""
        return cls(
            timestamp=int(raw["timestamp"]),
            face_value=str(raw["faceValue"]),
            face_value_usd=str(raw["faceValueUSD"]),
            recipient=str(raw["recipient"]["id"]),
            sender=str(raw["sender"]["id"]),
            transaction=str(raw["transaction"]["id"]),
        )
