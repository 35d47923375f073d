"""ENS name and avatar resolution for orchestrator addresses."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from web3 import HTTPProvider, Web3

from payout_bot.models.records import BestEffort, Identity

log = logging.getLogger(__name__)

IPFS_GATEWAY = "https://gateway.ipfs.io/ipfs/"


def avatar_url(record: str | None) -> str | None:
    """Turn an ENS ``avatar`` text record into a fetchable URL.

    HTTP(S) URLs pass through and ``ipfs://`` URIs go via the public
    gateway. NFT references (``eip155:...``) and anything else are dropped.
    """
    if not record:
        return None
    record = record.strip()
    if record.startswith(("https://", "http://")):
        return record
    if record.startswith("ipfs://"):
        path = record[len("ipfs://"):]
        if path.startswith("ipfs/"):
            path = path[len("ipfs/"):]
        return f"{IPFS_GATEWAY}{path}" if path else None
    return None


class EnsNameResolver:
    """Resolves reverse ENS records on Ethereum mainnet.

    web3's ENS module is synchronous, so lookups run in a worker thread and
    are bounded by ``timeout`` on top of the provider's own request timeout.
    """

    def __init__(self, rpc_url: str, timeout: float = 5, ens: Any = None) -> None:
        self._timeout = timeout
        if ens is None:
            w3 = Web3(HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))
            ens = w3.ens
        self._ens = ens

    def _lookup(self, address: str) -> tuple[str | None, str | None]:
        checksum = Web3.to_checksum_address(address)
        name = self._ens.name(checksum)
        if not name:
            return None, None
        try:
            image = avatar_url(self._ens.get_text(name, "avatar"))
        except Exception as exc:
            log.debug("No avatar for %s: %s", name, exc)
            image = None
        return name, image

    async def resolve(self, address: str, default_name: str) -> BestEffort[Identity]:
        try:
            name, image = await asyncio.wait_for(
                asyncio.to_thread(self._lookup, address), timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            return BestEffort.default(Identity(name=default_name), "ENS lookup timeout")
        except Exception as exc:
            return BestEffort.default(Identity(name=default_name), f"ENS lookup failed: {exc}")

        if not name:
            return BestEffort.default(Identity(name=default_name))
        log.debug("Resolved %s to %s", address[:10], name)
        return BestEffort.ok(Identity(name=name, image=image))
