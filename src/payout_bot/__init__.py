"""Livepeer winning ticket payout notifications."""

__version__ = "0.1.0"
