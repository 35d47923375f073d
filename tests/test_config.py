"""Tests 52-57: Configuration layering and the CLI."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from payout_bot.cli import cli
from payout_bot.config import load_config
from payout_bot.errors import ConfigError
from payout_bot.models.config import DEFAULT_AI_BROADCASTERS, PIXELS_PER_MINUTE

ENV_NAMES = [
    "API_TOKEN", "CRON_SECRET", "GRAPH_API_KEY", "SUBGRAPH_URL", "DB_PATH",
    "INFURA_KEY", "ENS_RPC_URL", "PRICE_PER_PIXEL", "PRICING_URL",
    "DISCORD_WEBHOOK_URL", "TWITTER_CONSUMER_KEY", "TWITTER_CONSUMER_SECRET",
    "TWITTER_ACCESS_TOKEN_KEY", "TWITTER_ACCESS_TOKEN_SECRET", "NOTIFY_ON_COLD_START",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(f"PAYOUT_BOT_{name}", raising=False)
    monkeypatch.delenv("PAYOUT_BOT_PORT", raising=False)


# ── Test 52: Defaults ────────────────────────────────────────────


def test_defaults():
    cfg = load_config()

    assert cfg.page_size == 20
    assert cfg.pixels_per_minute == PIXELS_PER_MINUTE
    assert cfg.default_price_per_pixel == pytest.approx(1.2e-15)
    assert cfg.ai_broadcasters == DEFAULT_AI_BROADCASTERS
    assert cfg.notify_on_cold_start is False
    assert not cfg.discord.enabled
    assert not cfg.twitter.enabled
    assert cfg.bearer_tokens == []
    assert cfg.graph_url.startswith("https://gateway-arbitrum.network.thegraph.com/api/")


# ── Test 53: TOML file ───────────────────────────────────────────


def test_toml_file(tmp_path):
    path = tmp_path / "bot.toml"
    path.write_text(
        """
[bot]
notify_on_cold_start = true
lease_ttl = 120

[subgraph]
graph_api_key = "graph-key"
page_size = 1

[storage]
db_path = "{db}"

[pricing]
default_price_per_pixel_wei = 2400

[ens]
infura_key = "infura"

[classify]
ai_broadcasters = ["0xabc"]

[discord]
webhook_url = "https://discord.test/hook"
""".format(db=tmp_path / "state.db")
    )

    cfg = load_config(path)

    assert cfg.notify_on_cold_start is True
    assert cfg.lease_ttl == 120
    assert cfg.page_size == 1
    assert cfg.db_path == str(tmp_path / "state.db")
    assert cfg.default_price_per_pixel == pytest.approx(2.4e-15)
    assert cfg.ens_url == "https://mainnet.infura.io/v3/infura"
    assert cfg.ai_broadcasters == ["0xabc"]
    assert cfg.discord.enabled
    assert cfg.graph_url.endswith("/api/graph-key/subgraphs/id/FE63YgkzcpVocxdCEyEYbvjYqEf2kb1A6daMYRxmejYC")


# ── Test 54: Environment wins, bare names accepted ───────────────


def test_env_overrides(monkeypatch, tmp_path):
    path = tmp_path / "bot.toml"
    path.write_text('[discord]\nwebhook_url = "https://discord.test/from-file"\n')
    monkeypatch.setenv("PAYOUT_BOT_DISCORD_WEBHOOK_URL", "https://discord.test/from-env")
    monkeypatch.setenv("API_TOKEN", "bare-token")
    monkeypatch.setenv("CRON_SECRET", "cron")
    for name in ("CONSUMER_KEY", "CONSUMER_SECRET", "ACCESS_TOKEN_KEY", "ACCESS_TOKEN_SECRET"):
        monkeypatch.setenv(f"TWITTER_{name}", name.lower())

    cfg = load_config(path)

    assert cfg.discord.webhook_url == "https://discord.test/from-env"
    assert cfg.bearer_tokens == ["bare-token", "cron"]
    assert cfg.twitter.enabled


# ── Test 55: Bad values raise ConfigError ────────────────────────


def test_zero_page_size_rejected(tmp_path):
    path = tmp_path / "bot.toml"
    path.write_text("[subgraph]\npage_size = 0\n")

    with pytest.raises(ConfigError, match="page_size"):
        load_config(path)


def test_non_numeric_env_rejected(monkeypatch):
    monkeypatch.setenv("PAYOUT_BOT_PRICE_PER_PIXEL", "cheap")

    with pytest.raises(ConfigError):
        load_config()


def test_broken_toml(tmp_path):
    path = tmp_path / "bot.toml"
    path.write_text("[bot\n")
    with pytest.raises(ConfigError):
        load_config(path)


# ── Test 56: status masks secrets ────────────────────────────────


def test_cli_status(monkeypatch):
    monkeypatch.setenv("API_TOKEN", "super-secret")

    result = CliRunner().invoke(cli, ["status"])

    assert result.exit_code == 0
    assert "***configured***" in result.output
    assert "super-secret" not in result.output
    assert "seed silently" in result.output


# ── Test 57: cursor set / show round trip ────────────────────────


def test_cli_cursor(tmp_path, monkeypatch):
    monkeypatch.setenv("PAYOUT_BOT_DB_PATH", str(tmp_path / "state.db"))
    runner = CliRunner()

    result = runner.invoke(cli, ["cursor", "show"])
    assert result.exit_code == 0
    assert "(not set)" in result.output

    result = runner.invoke(cli, ["cursor", "set", "1651264131"])
    assert result.exit_code == 0

    result = runner.invoke(cli, ["cursor", "show"])
    assert "1651264131" in result.output


@pytest.mark.parametrize("args", [["cursor", "show"], ["cursor", "set", "1"]])
def test_cli_cursor_unopenable_store(tmp_path, monkeypatch, args):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    monkeypatch.setenv("PAYOUT_BOT_DB_PATH", str(blocker / "state.db"))

    result = CliRunner().invoke(cli, args)

    assert result.exit_code == 1
    assert "Error: cannot open cursor store" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)
