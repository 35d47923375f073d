"""SQLite implementation of the CursorStore protocol."""

from __future__ import annotations

import logging
import sqlite3
import time
from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from payout_bot.errors import StoreError

log = logging.getLogger(__name__)

SCHEMA = """
-- Timestamp of the newest ticket already notified on
CREATE TABLE IF NOT EXISTS cursor (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    timestamp INTEGER NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);

-- Run lease guarding against overlapping update invocations
CREATE TABLE IF NOT EXISTS lease (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    owner TEXT NOT NULL,
    expires_at REAL NOT NULL
);
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SQLiteCursorStore:
    """SQLite-backed implementation of the CursorStore protocol.

    The connection is opened lazily on first use and reused until close(),
    so one store instance can serve every invocation in a process.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._db: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        if self._db is not None:
            return
        try:
            if self._db_path != ":memory:":
                Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
            self._db = await aiosqlite.connect(self._db_path)
            self._db.row_factory = aiosqlite.Row
            await self._db.executescript(SCHEMA)
            await self._db.commit()
        except (OSError, sqlite3.Error) as exc:
            raise StoreError(f"cannot open cursor store {self._db_path}: {exc}") from exc
        log.debug("Cursor store ready at %s", self._db_path)

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    async def _conn(self) -> aiosqlite.Connection:
        if self._db is None:
            await self.initialize()
        assert self._db is not None
        return self._db

    # ── Cursor ─────────────────────────────────────────────

    async def get_cursor(self) -> int | None:
        db = await self._conn()
        try:
            async with db.execute("SELECT timestamp FROM cursor WHERE id=1") as cur:
                row = await cur.fetchone()
                return row["timestamp"] if row else None
        except sqlite3.Error as exc:
            raise StoreError(f"cursor read failed: {exc}") from exc

    async def set_cursor(self, timestamp: int) -> None:
        db = await self._conn()
        try:
            await db.execute(
                "INSERT INTO cursor (id, timestamp, updated_at) VALUES (1, ?, ?)"
                " ON CONFLICT(id) DO UPDATE SET timestamp=excluded.timestamp,"
                " updated_at=excluded.updated_at",
                (timestamp, _now()),
            )
            await db.commit()
        except sqlite3.Error as exc:
            raise StoreError(f"cursor write failed: {exc}") from exc

    # ── Lease ──────────────────────────────────────────────

    async def acquire_lease(self, owner: str, ttl: int) -> bool:
        db = await self._conn()
        now = time.time()
        try:
            # Take the row if free, expired, or already ours.
            cur = await db.execute(
                "INSERT INTO lease (id, owner, expires_at) VALUES (1, ?, ?)"
                " ON CONFLICT(id) DO UPDATE SET owner=excluded.owner,"
                " expires_at=excluded.expires_at"
                " WHERE lease.expires_at < ? OR lease.owner = excluded.owner",
                (owner, now + ttl, now),
            )
            await db.commit()
            acquired = cur.rowcount > 0
        except sqlite3.Error as exc:
            raise StoreError(f"lease acquire failed: {exc}") from exc
        if not acquired:
            log.info("Lease held by another invocation, %s skipped", owner)
        return acquired

    async def release_lease(self, owner: str) -> None:
        db = await self._conn()
        try:
            await db.execute("DELETE FROM lease WHERE id=1 AND owner=?", (owner,))
            await db.commit()
        except sqlite3.Error as exc:
            raise StoreError(f"lease release failed: {exc}") from exc
