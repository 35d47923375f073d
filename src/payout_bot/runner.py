"""Update runner - wires the components together for one notification pass."""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import socket
import uuid

from payout_bot.enrich.ens import EnsNameResolver
from payout_bot.enrich.pricing import FixedPriceSource, HttpPriceSource
from payout_bot.interfaces.enrich import NameResolver, PriceSource
from payout_bot.models.config import BotConfig
from payout_bot.models.events import TicketEvent
from payout_bot.models.records import MessageData, RunReport
from payout_bot.notify.dispatcher import NotificationDispatcher, build_notifiers
from payout_bot.storage.sqlite import SQLiteCursorStore
from payout_bot.subgraph.source import GraphEventSource
from payout_bot.tickets.formatter import build_message_data
from payout_bot.tickets.selector import select_new_events

log = logging.getLogger(__name__)


def _lease_owner() -> str:
    return f"{socket.gethostname()}:{os.getpid()}:{uuid.uuid4().hex[:8]}"


class PayoutRunner:
    """Polls for new winning tickets and posts a notification for each.

    One ``run_once()`` call is one invocation: read the cursor, fetch the
    latest page, advance the cursor, then notify oldest first. The store
    handle is opened on first use and reused by later invocations.
    """

    def __init__(self, cfg: BotConfig) -> None:
        self._cfg = cfg
        self._running = False

        self.store = SQLiteCursorStore(cfg.db_path)
        self.source = GraphEventSource(cfg.graph_url, timeout=cfg.http_timeout)

        self.resolver: NameResolver | None = None
        if cfg.ens_url:
            self.resolver = EnsNameResolver(cfg.ens_url, timeout=cfg.enrich_timeout)

        self.prices: PriceSource
        if cfg.pricing_url:
            self.prices = HttpPriceSource(
                cfg.pricing_url, cfg.default_price_per_pixel, timeout=cfg.enrich_timeout,
            )
        else:
            self.prices = FixedPriceSource(cfg.default_price_per_pixel)

        self.dispatcher = NotificationDispatcher(build_notifiers(cfg))

    async def close(self) -> None:
        await self.store.close()

    async def build_message(self, event: TicketEvent) -> MessageData:
        return await build_message_data(
            event,
            self.resolver,
            self.prices,
            ai_broadcasters=self._cfg.ai_broadcasters,
            pixels_per_minute=self._cfg.pixels_per_minute,
        )

    async def run_once(self) -> RunReport:
        """Run one update under the store lease.

        Raises EventSourceError or StoreError when upstream data is
        unavailable; nothing is posted in that case.
        """
        await self.store.initialize()
        owner = _lease_owner()
        if not await self.store.acquire_lease(owner, self._cfg.lease_ttl):
            return RunReport(skipped=True)
        try:
            return await self._update()
        finally:
            await self.store.release_lease(owner)

    async def _update(self) -> RunReport:
        previous = await self.store.get_cursor()
        events = await self.source.fetch_latest(self._cfg.page_size)
        report = RunReport(
            previous_cursor=previous, new_cursor=previous, fetched=len(events),
        )

        if previous is None and not self._cfg.notify_on_cold_start:
            report.seeded = True
            if events:
                await self.store.set_cursor(events[0].timestamp)
                report.new_cursor = events[0].timestamp
            log.info("No cursor yet, seeded at %s without notifying", report.new_cursor)
            return report

        selection = select_new_events(events, previous)
        report.selected = len(selection.events)
        if not selection.advanced:
            log.info("No new winning tickets since %s", previous)
            return report

        # Advance before posting: a failed post is dropped rather than repeated.
        await self.store.set_cursor(selection.cursor)
        report.new_cursor = selection.cursor
        destinations = self.dispatcher.destinations
        log.info(
            "%d new winning tickets, cursor %s -> %s, posting to %s",
            report.selected, previous, selection.cursor,
            ", ".join(destinations) or "nowhere",
        )
        if not destinations:
            log.warning("No Discord webhook or Twitter credentials configured")

        for event in selection.events:
            message = await self.build_message(event)
            report.results.extend(await self.dispatcher.dispatch(event, message))

        if report.failures:
            log.warning(
                "%d of %d notifications failed", len(report.failures), len(report.results),
            )
        return report

    async def preview(self, limit: int = 1) -> list[tuple[TicketEvent, MessageData]]:
        """Format the newest tickets without posting or touching the cursor."""
        events = await self.source.fetch_latest(limit)
        return [(event, await self.build_message(event)) for event in events]

    # ── Watch loop ─────────────────────────────────────────

    async def stop(self) -> None:
        log.info("Stop requested")
        self._running = False

    async def watch(self) -> None:
        """Call run_once() every poll_interval until stopped."""
        self._running = True
        try:
            while self._running:
                try:
                    await self.run_once()
                    await asyncio.sleep(self._cfg.poll_interval)
                except asyncio.CancelledError:
                    log.info("Watch loop cancelled")
                    break
                except Exception as exc:
                    log.error("Update failed: %s", exc, exc_info=True)
                    await asyncio.sleep(self._cfg.error_backoff)
        finally:
            await self.close()
            log.info("Watch loop stopped")


async def run_watch(cfg: BotConfig) -> None:
    """Entry point for the polling loop."""
    runner = PayoutRunner(cfg)

    loop = asyncio.get_running_loop()

    def _signal_handler():
        asyncio.ensure_future(runner.stop())

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            pass

    await runner.watch()
