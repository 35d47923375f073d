"""Price-per-pixel lookup - per-orchestrator pricing with a fixed fallback."""

from __future__ import annotations

import logging
import math

import httpx

from payout_bot.models.config import WEI_PER_ETH
from payout_bot.models.records import BestEffort

log = logging.getLogger(__name__)


class FixedPriceSource:
    """Always answers with the configured default price."""

    def __init__(self, price_per_pixel: float) -> None:
        self._price = price_per_pixel

    async def price_per_pixel(self, address: str) -> BestEffort[float]:
        return BestEffort.ok(self._price)


class HttpPriceSource:
    """Fetches an orchestrator's price per pixel from a scoring service.

    ``url_template`` must contain ``{address}``; the response is a JSON
    object whose ``pricePerPixel`` field is in wei. Any failure returns the
    default price.
    """

    def __init__(
        self,
        url_template: str,
        default_price: float,
        timeout: float = 5,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url_template = url_template
        self._default = default_price
        self._timeout = timeout
        self._transport = transport

    async def price_per_pixel(self, address: str) -> BestEffort[float]:
        try:
            url = self._url_template.format(address=address.lower())
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport,
            ) as client:
                resp = await client.get(url)
                resp.raise_for_status()
                data = resp.json()
            wei = float(data["pricePerPixel"])
        except httpx.TimeoutException:
            return BestEffort.default(self._default, "pricing service timeout")
        except httpx.HTTPStatusError as exc:
            return BestEffort.default(
                self._default, f"pricing service HTTP {exc.response.status_code}",
            )
        except (
            httpx.HTTPError, httpx.InvalidURL, ValueError, KeyError, IndexError, TypeError,
        ) as exc:
            # A broken pricing_url template lands here too
            return BestEffort.default(self._default, f"pricing lookup failed: {exc}")

        if not math.isfinite(wei) or wei <= 0:
            return BestEffort.default(self._default, f"unusable price {wei}")

        price = wei / WEI_PER_ETH
        log.debug("Price per pixel for %s: %g ETH", address[:10], price)
        return BestEffort.ok(price)
