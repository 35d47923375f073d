"""Twitter/X notifier - posts the payout status with OAuth 1.0a user context."""

from __future__ import annotations

import logging

import httpx
from oauthlib.oauth1 import Client as OAuth1Client

from payout_bot.models.config import TwitterConfig
from payout_bot.models.events import TicketEvent
from payout_bot.models.records import DispatchResult, MessageData

log = logging.getLogger(__name__)


class TwitterNotifier:
    """Posts a status via the v2 ``/2/tweets`` endpoint."""

    name = "twitter"

    def __init__(
        self,
        cfg: TwitterConfig,
        timeout: float = 15,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._cfg = cfg
        self._timeout = timeout
        self._transport = transport
        self._oauth = OAuth1Client(
            cfg.consumer_key,
            client_secret=cfg.consumer_secret,
            resource_owner_key=cfg.access_token_key,
            resource_owner_secret=cfg.access_token_secret,
        )

    def _signed_headers(self) -> dict[str, str]:
        # JSON bodies are not part of the OAuth 1.0a signature base string.
        _, headers, _ = self._oauth.sign(self._cfg.api_url, http_method="POST")
        return dict(headers)

    async def send(self, event: TicketEvent, message: MessageData) -> DispatchResult:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport,
            ) as client:
                resp = await client.post(
                    self._cfg.api_url,
                    json={"text": message.twitter_status},
                    headers=self._signed_headers(),
                )
                resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            code = exc.response.status_code
            error = "rate limited" if code == 429 else f"tweet HTTP {code}"
            return DispatchResult(
                destination=self.name,
                transaction=event.transaction,
                success=False,
                status_code=code,
                error=error,
            )
        except httpx.HTTPError as exc:
            return DispatchResult(
                destination=self.name,
                transaction=event.transaction,
                success=False,
                error=f"tweet request failed: {exc!r}",
            )

        try:
            body = resp.json()
        except ValueError:
            body = {}
        tweet_id = (body.get("data") or {}).get("id") if isinstance(body, dict) else None
        log.info("Tweet posted for tx %s (id=%s)", event.transaction, tweet_id or "?")
        return DispatchResult(
            destination=self.name,
            transaction=event.transaction,
            success=True,
            status_code=resp.status_code,
        )
