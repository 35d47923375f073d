"""Internal record types for selections, enrichment and dispatch results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from payout_bot.models.events import TicketEvent, TicketKind

T = TypeVar("T")


@dataclass
class BestEffort(Generic[T]):
    """Outcome of an enrichment step that must never abort the caller.

    ``fallback`` is True when ``value`` is the default rather than a looked-up
    value; ``error`` carries the reason when the lookup failed.
    """

    value: T
    fallback: bool = False
    error: str | None = None

    @classmethod
    def ok(cls, value: T) -> BestEffort[T]:
        return cls(value=value)

    @classmethod
    def default(cls, value: T, error: str | None = None) -> BestEffort[T]:
        return cls(value=value, fallback=True, error=error)


@dataclass
class Identity:
    """Display identity for an orchestrator address."""

    name: str
    image: str | None = None


@dataclass
class Selection:
    """Result of comparing a page of tickets against the stored cursor."""

    events: list[TicketEvent]  # oldest first
    cursor: int | None  # candidate new cursor
    advanced: bool = False


@dataclass
class MessageData:
    """Notification text and card metadata for one ticket."""

    name: str
    image: str | None
    minutes: float
    twitter_status: str
    discord_description: str
    card_color: int
    kind: TicketKind


@dataclass
class DispatchResult:
    """Result of posting one notification to one destination."""

    destination: str  # "discord", "twitter"
    transaction: str
    success: bool
    status_code: int | None = None
    error: str | None = None


@dataclass
class RunReport:
    """Summary of a single update invocation."""

    previous_cursor: int | None = None
    new_cursor: int | None = None
    fetched: int = 0
    selected: int = 0
    seeded: bool = False  # cold start: cursor stored, nothing posted
    skipped: bool = False  # another invocation holds the lease
    results: list[DispatchResult] = field(default_factory=list)

    @property
    def failures(self) -> list[DispatchResult]:
        return [r for r in self.results if not r.success]
