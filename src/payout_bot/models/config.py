"""Configuration models for the payout bot."""

from __future__ import annotations

from dataclasses import dataclass, field

WEI_PER_ETH = 10**18

# Pixels in one minute of 30fps video summed over 240p, 360p, 480p and 720p
# (width * height * framerate * 60 seconds).
PIXELS_PER_MINUTE = 2_995_488_000

DEFAULT_PRICE_PER_PIXEL_WEI = 1200
DEFAULT_PRICE_PER_PIXEL = DEFAULT_PRICE_PER_PIXEL_WEI / WEI_PER_ETH  # ETH

# Broadcasters known to send AI-inference tickets rather than transcoding ones.
DEFAULT_AI_BROADCASTERS = [
    "0x012345dE92B630C065dFc0caBE4eB34f74f7FC85",
]

LIVEPEER_SUBGRAPH_ID = "FE63YgkzcpVocxdCEyEYbvjYqEf2kb1A6daMYRxmejYC"


@dataclass
class DiscordConfig:
    """Discord webhook destination."""

    webhook_url: str = ""
    username: str = "Payout Alert Bot"
    avatar_url: str = (
        "https://user-images.githubusercontent.com/555740/"
        "107160745-213a9480-6966-11eb-927f-a53ae12ab219.png"
    )

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)


@dataclass
class TwitterConfig:
    """Twitter/X OAuth 1.0a user-context credentials."""

    consumer_key: str = ""
    consumer_secret: str = ""
    access_token_key: str = ""
    access_token_secret: str = ""
    api_url: str = "https://api.twitter.com/2/tweets"

    @property
    def enabled(self) -> bool:
        return all([
            self.consumer_key,
            self.consumer_secret,
            self.access_token_key,
            self.access_token_secret,
        ])


@dataclass
class BotConfig:
    """Complete bot configuration."""

    # Bot
    log_level: str = "info"
    poll_interval: int = 60  # seconds, only used by `watch`
    error_backoff: int = 30  # seconds
    notify_on_cold_start: bool = False
    lease_ttl: int = 300  # seconds

    # Inbound trigger
    api_token: str = ""
    cron_secret: str = ""
    host: str = "0.0.0.0"
    port: int = 8080

    # Subgraph
    graph_api_key: str = ""
    subgraph_id: str = LIVEPEER_SUBGRAPH_ID
    subgraph_url: str = ""  # overrides the gateway URL built from key + id
    page_size: int = 20
    http_timeout: int = 15  # seconds

    # Storage
    db_path: str = "~/.payout_bot/state.db"

    # Pricing
    default_price_per_pixel_wei: int = DEFAULT_PRICE_PER_PIXEL_WEI
    pixels_per_minute: int = PIXELS_PER_MINUTE
    pricing_url: str = ""  # e.g. "https://example.org/api/score/{address}"
    enrich_timeout: int = 5  # seconds

    # ENS
    ens_rpc_url: str = ""
    infura_key: str = ""

    # Classification
    ai_broadcasters: list[str] = field(
        default_factory=lambda: list(DEFAULT_AI_BROADCASTERS)
    )

    # Destinations
    discord: DiscordConfig = field(default_factory=DiscordConfig)
    twitter: TwitterConfig = field(default_factory=TwitterConfig)

    @property
    def graph_url(self) -> str:
        if self.subgraph_url:
            return self.subgraph_url
        return (
            "https://gateway-arbitrum.network.thegraph.com/api/"
            f"{self.graph_api_key}/subgraphs/id/{self.subgraph_id}"
        )

    @property
    def ens_url(self) -> str:
        if self.ens_rpc_url:
            return self.ens_rpc_url
        if self.infura_key:
            return f"https://mainnet.infura.io/v3/{self.infura_key}"
        return ""

    @property
    def default_price_per_pixel(self) -> float:
        """Default price per pixel in ETH."""
        return self.default_price_per_pixel_wei / WEI_PER_ETH

    @property
    def bearer_tokens(self) -> list[str]:
        return [t for t in (self.api_token, self.cron_secret) if t]
