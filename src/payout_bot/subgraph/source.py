"""Subgraph event source - fetches recent winning tickets over GraphQL."""

from __future__ import annotations

import logging

import httpx

from payout_bot.errors import EventSourceError
from payout_bot.models.events import TicketEvent
from payout_bot.subgraph.queries import WINNING_TICKETS_QUERY

log = logging.getLogger(__name__)


def _parse_events(payload: dict) -> list[TicketEvent]:
    """Pull ticket events out of a GraphQL response body.

    Raises EventSourceError for GraphQL errors or a malformed body; a single
    malformed ticket fails the whole page so the cursor never skips it.
    """
    if payload.get("errors"):
        messages = [e.get("message", str(e)) for e in payload["errors"]]
        raise EventSourceError(f"subgraph returned errors: {'; '.join(messages)}")

    data = payload.get("data") or {}
    raw_events = data.get("winningTicketRedeemedEvents")
    if raw_events is None:
        raise EventSourceError("subgraph response missing winningTicketRedeemedEvents")

    try:
        return [TicketEvent.from_graph(raw) for raw in raw_events]
    except (KeyError, TypeError, ValueError) as exc:
        raise EventSourceError(f"malformed ticket event: {exc}") from exc


class GraphEventSource:
    """Queries the Livepeer subgraph for the newest winning tickets."""

    def __init__(
        self,
        url: str,
        timeout: float = 15,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._transport = transport

    async def fetch_latest(self, limit: int) -> list[TicketEvent]:
        body = {"query": WINNING_TICKETS_QUERY, "variables": {"first": limit}}
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout, connect=10),
                transport=self._transport,
            ) as client:
                resp = await client.post(self._url, json=body)
                resp.raise_for_status()
                payload = resp.json()
        except httpx.TimeoutException as exc:
            raise EventSourceError(f"subgraph timeout after {self._timeout}s") from exc
        except httpx.HTTPStatusError as exc:
            raise EventSourceError(f"subgraph HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise EventSourceError(f"subgraph request failed: {exc}") from exc
        except ValueError as exc:
            raise EventSourceError(f"subgraph returned invalid JSON: {exc}") from exc

        if not isinstance(payload, dict):
            raise EventSourceError("subgraph returned a non-object body")

        events = _parse_events(payload)
        log.info("Fetched %d winning tickets (limit %d)", len(events), limit)
        return events
