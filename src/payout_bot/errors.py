"""Exceptions for failures that must abort an update run."""

from __future__ import annotations


class PayoutBotError(Exception):
    """Base class for payout bot errors."""


class ConfigError(PayoutBotError):
    """Configuration is missing or invalid."""


class EventSourceError(PayoutBotError):
    """The subgraph query failed or returned unusable data."""


class StoreError(PayoutBotError):
    """The cursor store could not be read or written."""
