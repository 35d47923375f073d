"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import os
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from payout_bot.errors import ConfigError
from payout_bot.models.config import BotConfig, DiscordConfig, TwitterConfig


def _env(env_prefix: str, name: str) -> str | None:
    """Prefixed variable first, then the bare name the deployment used."""
    return os.environ.get(f"{env_prefix}{name}") or os.environ.get(name)


def _as_bool(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "PAYOUT_BOT_",
) -> BotConfig:
    """Load bot configuration from a TOML file and env vars.

    Priority (highest wins):
        1. Environment variables (PAYOUT_BOT_API_TOKEN, or bare API_TOKEN, etc.)
        2. TOML config file
        3. Defaults from BotConfig
    """
    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            try:
                with open(p, "rb") as f:
                    raw = tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"invalid config file {p}: {exc}") from exc

    cfg = BotConfig()

    try:
        # ── Bot section ────────────────────────────────────────
        bot = raw.get("bot", {})
        if v := bot.get("log_level"):
            cfg.log_level = str(v)
        if v := bot.get("poll_interval"):
            cfg.poll_interval = int(v)
        if v := bot.get("error_backoff"):
            cfg.error_backoff = int(v)
        if "notify_on_cold_start" in bot:
            cfg.notify_on_cold_start = _as_bool(bot["notify_on_cold_start"])
        if v := bot.get("lease_ttl"):
            cfg.lease_ttl = int(v)

        # ── Server section ─────────────────────────────────────
        server = raw.get("server", {})
        if v := server.get("host"):
            cfg.host = str(v)
        if v := server.get("port"):
            cfg.port = int(v)
        if v := server.get("api_token"):
            cfg.api_token = str(v)
        if v := server.get("cron_secret"):
            cfg.cron_secret = str(v)

        # ── Subgraph section ───────────────────────────────────
        subgraph = raw.get("subgraph", {})
        if v := subgraph.get("graph_api_key"):
            cfg.graph_api_key = str(v)
        if v := subgraph.get("subgraph_id"):
            cfg.subgraph_id = str(v)
        if v := subgraph.get("subgraph_url"):
            cfg.subgraph_url = str(v)
        if "page_size" in subgraph:
            cfg.page_size = int(subgraph["page_size"])
        if v := subgraph.get("http_timeout"):
            cfg.http_timeout = int(v)

        # ── Storage section ────────────────────────────────────
        storage = raw.get("storage", {})
        if v := storage.get("db_path"):
            cfg.db_path = str(v)

        # ── Pricing section ────────────────────────────────────
        pricing = raw.get("pricing", {})
        if v := pricing.get("default_price_per_pixel_wei"):
            cfg.default_price_per_pixel_wei = int(v)
        if v := pricing.get("pixels_per_minute"):
            cfg.pixels_per_minute = int(v)
        if v := pricing.get("pricing_url"):
            cfg.pricing_url = str(v)
        if v := pricing.get("enrich_timeout"):
            cfg.enrich_timeout = int(v)

        # ── ENS section ────────────────────────────────────────
        ens = raw.get("ens", {})
        if v := ens.get("rpc_url"):
            cfg.ens_rpc_url = str(v)
        if v := ens.get("infura_key"):
            cfg.infura_key = str(v)

        # ── Classification section ─────────────────────────────
        classify = raw.get("classify", {})
        if "ai_broadcasters" in classify:
            cfg.ai_broadcasters = [str(a) for a in classify["ai_broadcasters"]]

        # ── Destinations ───────────────────────────────────────
        discord = raw.get("discord", {})
        cfg.discord = DiscordConfig(
            webhook_url=str(discord.get("webhook_url", "")),
            username=str(discord.get("username", DiscordConfig.username)),
            avatar_url=str(discord.get("avatar_url", DiscordConfig.avatar_url)),
        )
        twitter = raw.get("twitter", {})
        cfg.twitter = TwitterConfig(
            consumer_key=str(twitter.get("consumer_key", "")),
            consumer_secret=str(twitter.get("consumer_secret", "")),
            access_token_key=str(twitter.get("access_token_key", "")),
            access_token_secret=str(twitter.get("access_token_secret", "")),
        )

        # ── Environment variable overrides (highest priority) ──
        if v := _env(env_prefix, "API_TOKEN"):
            cfg.api_token = v
        if v := _env(env_prefix, "CRON_SECRET"):
            cfg.cron_secret = v
        if v := _env(env_prefix, "GRAPH_API_KEY"):
            cfg.graph_api_key = v
        if v := _env(env_prefix, "SUBGRAPH_URL"):
            cfg.subgraph_url = v
        if v := _env(env_prefix, "DB_PATH"):
            cfg.db_path = v
        if v := _env(env_prefix, "INFURA_KEY"):
            cfg.infura_key = v
        if v := _env(env_prefix, "ENS_RPC_URL"):
            cfg.ens_rpc_url = v
        if v := _env(env_prefix, "PRICE_PER_PIXEL"):
            cfg.default_price_per_pixel_wei = int(v)
        if v := _env(env_prefix, "PRICING_URL"):
            cfg.pricing_url = v
        if v := _env(env_prefix, "DISCORD_WEBHOOK_URL"):
            cfg.discord.webhook_url = v
        if v := _env(env_prefix, "TWITTER_CONSUMER_KEY"):
            cfg.twitter.consumer_key = v
        if v := _env(env_prefix, "TWITTER_CONSUMER_SECRET"):
            cfg.twitter.consumer_secret = v
        if v := _env(env_prefix, "TWITTER_ACCESS_TOKEN_KEY"):
            cfg.twitter.access_token_key = v
        if v := _env(env_prefix, "TWITTER_ACCESS_TOKEN_SECRET"):
            cfg.twitter.access_token_secret = v
        if v := _env(env_prefix, "NOTIFY_ON_COLD_START"):
            cfg.notify_on_cold_start = _as_bool(v)
        if v := os.environ.get(f"{env_prefix}PORT"):
            cfg.port = int(v)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid configuration value: {exc}") from exc

    if cfg.page_size < 1:
        raise ConfigError(f"page_size must be at least 1, got {cfg.page_size}")

    # Expand ~ in paths
    if cfg.db_path != ":memory:":
        cfg.db_path = str(Path(cfg.db_path).expanduser())

    return cfg
