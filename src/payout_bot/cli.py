"""CLI entry point for the payout bot."""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from payout_bot.config import load_config
from payout_bot.errors import PayoutBotError
from payout_bot.models.config import BotConfig
from payout_bot.models.records import RunReport
from payout_bot.runner import PayoutRunner, run_watch
from payout_bot.storage.sqlite import SQLiteCursorStore


def _mask(value: str) -> str:
    return "***configured***" if value else "(not set)"


def _load(ctx: click.Context) -> BotConfig:
    try:
        cfg = load_config(ctx.obj["config_path"])
    except PayoutBotError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    if not ctx.obj["verbose"]:
        logging.getLogger().setLevel(cfg.log_level.upper())
    return cfg


def _echo_report(report: RunReport) -> None:
    if report.skipped:
        click.echo("Skipped: another update holds the lease")
        return
    click.echo(f"Fetched:    {report.fetched}")
    click.echo(f"Cursor:     {report.previous_cursor} -> {report.new_cursor}")
    if report.seeded:
        click.echo("Seeded cursor on first run; no notifications sent")
        return
    click.echo(f"New:        {report.selected}")
    for r in report.results:
        mark = "ok" if r.success else f"FAILED ({r.error})"
        click.echo(f"  {r.destination:<8} {r.transaction[:18]}  {mark}")


@click.group()
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """payout-bot - Livepeer winning ticket notifications for Discord and Twitter."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# ── Running ────────────────────────────────────────────


@cli.command()
@click.pass_context
def serve(ctx: click.Context) -> None:
    """Serve the authenticated /api/update trigger."""
    from payout_bot.server import run_server

    cfg = _load(ctx)
    click.echo(f"Listening on {cfg.host}:{cfg.port}")
    run_server(cfg)


@cli.command()
@click.pass_context
def update(ctx: click.Context) -> None:
    """Run a single update: fetch, select, notify."""
    cfg = _load(ctx)

    async def _update() -> RunReport:
        runner = PayoutRunner(cfg)
        try:
            return await runner.run_once()
        finally:
            await runner.close()

    try:
        report = asyncio.run(_update())
    except PayoutBotError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    _echo_report(report)


@cli.command()
@click.pass_context
def watch(ctx: click.Context) -> None:
    """Run updates every poll_interval seconds until interrupted."""
    cfg = _load(ctx)
    click.echo(f"Watching for winning tickets every {cfg.poll_interval}s")
    asyncio.run(run_watch(cfg))


@cli.command()
@click.option("-n", "--limit", type=int, default=1, show_default=True, help="Tickets to format")
@click.pass_context
def preview(ctx: click.Context, limit: int) -> None:
    """Print messages for the newest tickets without posting them."""
    cfg = _load(ctx)

    async def _preview():
        runner = PayoutRunner(cfg)
        try:
            return await runner.preview(limit)
        finally:
            await runner.close()

    try:
        items = asyncio.run(_preview())
    except PayoutBotError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    for event, message in items:
        click.echo(f"[{event.timestamp}] {message.kind.value}")
        click.echo(f"  tweet:   {message.twitter_status}")
        click.echo(f"  discord: {message.discord_description}")
        if message.image:
            click.echo(f"  image:   {message.image}")


# ── Info ───────────────────────────────────────────────


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show bot configuration."""
    cfg = _load(ctx)
    click.echo(f"Subgraph:     {cfg.subgraph_url or cfg.subgraph_id}")
    click.echo(f"Graph key:    {_mask(cfg.graph_api_key)}")
    click.echo(f"Page size:    {cfg.page_size}")
    click.echo(f"DB path:      {cfg.db_path}")
    click.echo(f"API token:    {_mask(cfg.api_token)}")
    click.echo(f"Cron secret:  {_mask(cfg.cron_secret)}")
    click.echo(f"Discord:      {'enabled' if cfg.discord.enabled else 'disabled'}")
    click.echo(f"Twitter:      {'enabled' if cfg.twitter.enabled else 'disabled'}")
    click.echo(f"ENS:          {'enabled' if cfg.ens_url else 'disabled'}")
    click.echo(f"Pricing:      {cfg.pricing_url or f'fixed {cfg.default_price_per_pixel_wei} wei/pixel'}")
    click.echo(f"Cold start:   {'notify' if cfg.notify_on_cold_start else 'seed silently'}")


# ── Cursor ─────────────────────────────────────────────


@cli.group()
def cursor() -> None:
    """Inspect or move the notification cursor."""


@cursor.command("show")
@click.pass_context
def cursor_show(ctx: click.Context) -> None:
    """Print the stored cursor timestamp."""
    cfg = _load(ctx)

    async def _show() -> int | None:
        store = SQLiteCursorStore(cfg.db_path)
        try:
            return await store.get_cursor()
        finally:
            await store.close()

    try:
        value = asyncio.run(_show())
    except PayoutBotError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(value if value is not None else "(not set)")


@cursor.command("set")
@click.argument("timestamp", type=int)
@click.pass_context
def cursor_set(ctx: click.Context, timestamp: int) -> None:
    """Overwrite the cursor, e.g. to replay or skip tickets."""
    cfg = _load(ctx)

    async def _set() -> None:
        store = SQLiteCursorStore(cfg.db_path)
        try:
            await store.set_cursor(timestamp)
        finally:
            await store.close()

    try:
        asyncio.run(_set())
    except PayoutBotError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(f"Cursor set to {timestamp}")
