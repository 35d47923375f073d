"""HTTP trigger - runs one update per authorized request."""

from __future__ import annotations

import hmac
import logging

from aiohttp import web

from payout_bot.errors import PayoutBotError
from payout_bot.models.config import BotConfig
from payout_bot.runner import PayoutRunner

log = logging.getLogger(__name__)

RUNNER_KEY: web.AppKey[PayoutRunner] = web.AppKey("runner", PayoutRunner)
TOKENS_KEY: web.AppKey[list] = web.AppKey("tokens", list)


def is_authorized(header: str | None, tokens: list[str]) -> bool:
    """Check an ``Authorization: Bearer <token>`` header against the secrets."""
    if not header or not header.startswith("Bearer "):
        return False
    presented = header[len("Bearer "):]
    return any(
        hmac.compare_digest(presented.encode(), token.encode())
        for token in tokens if token
    )


async def handle_update(request: web.Request) -> web.StreamResponse:
    if not is_authorized(request.headers.get("Authorization"), request.app[TOKENS_KEY]):
        log.warning("Rejected update from %s: bad bearer token", request.remote)
        return web.json_response({"errors": ["Unauthorized"]}, status=403)

    runner = request.app[RUNNER_KEY]
    try:
        report = await runner.run_once()
    except PayoutBotError as exc:
        log.error("Update aborted: %s", exc)
        return web.json_response({"errors": [str(exc)]}, status=502)

    if report.skipped:
        return web.Response(text="Skipped")
    return web.Response(text="Success")


async def handle_health(request: web.Request) -> web.StreamResponse:
    runner = request.app[RUNNER_KEY]
    try:
        cursor = await runner.store.get_cursor()
    except PayoutBotError as exc:
        return web.json_response({"status": "error", "error": str(exc)}, status=503)
    return web.json_response({"status": "ok", "cursor": cursor})


def create_app(cfg: BotConfig, runner: PayoutRunner | None = None) -> web.Application:
    """Build the aiohttp application; the runner's store opens on startup."""
    app = web.Application()
    app[RUNNER_KEY] = runner or PayoutRunner(cfg)
    app[TOKENS_KEY] = cfg.bearer_tokens

    async def _on_startup(app: web.Application) -> None:
        await app[RUNNER_KEY].store.initialize()

    async def _on_cleanup(app: web.Application) -> None:
        await app[RUNNER_KEY].close()

    app.on_startup.append(_on_startup)
    app.on_cleanup.append(_on_cleanup)

    for path in ("/api/update", "/update"):
        app.router.add_route("GET", path, handle_update)
        app.router.add_route("POST", path, handle_update)
    app.router.add_get("/healthz", handle_health)
    return app


def run_server(cfg: BotConfig) -> None:
    if not cfg.bearer_tokens:
        log.warning("No API token or cron secret configured; every update request will be rejected")
    web.run_app(create_app(cfg), host=cfg.host, port=cfg.port, print=None)
