"""CursorStore protocol - persists the last notified ticket timestamp."""

from __future__ import annotations

from typing import Protocol


class CursorStore(Protocol):
    """Persists the notification cursor and the run lease."""

    # ── Lifecycle ──────────────────────────────────────────

    async def initialize(self) -> None:
        """Open the connection and create tables if they don't exist."""
        ...

    async def close(self) -> None:
        ...

    # ── Cursor ─────────────────────────────────────────────

    async def get_cursor(self) -> int | None:
        """Timestamp of the newest notified ticket, None before the first run."""
        ...

    async def set_cursor(self, timestamp: int) -> None:
        ...

    # ── Lease ──────────────────────────────────────────────

    async def acquire_lease(self, owner: str, ttl: int) -> bool:
        """Take the run lease unless another owner holds an unexpired one."""
        ...

    async def release_lease(self, owner: str) -> None:
        ...
