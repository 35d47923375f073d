"""New-ticket selection - compares a page of tickets against the stored cursor."""

from __future__ import annotations

import logging
from typing import Sequence

from payout_bot.models.events import TicketEvent
from payout_bot.models.records import Selection

log = logging.getLogger(__name__)


def select_new_events(
    events: Sequence[TicketEvent],
    cursor: int | None,
) -> Selection:
    """Pick the tickets newer than ``cursor`` from a newest-first page.

    Scanning stops at the first ticket at or below the cursor since
    everything after it is older. The returned queue is oldest first so
    notifications go out in chain order; tickets sharing a timestamp keep
    the relative order the source gave them. The candidate cursor is the
    head of the page, or the old cursor when nothing is new.

    If more new tickets exist than fit in the page the oldest are lost;
    this is only logged.
    """
    threshold = cursor or 0
    fresh: list[TicketEvent] = []
    for event in events:
        if event.timestamp > threshold:
            fresh.append(event)
        else:
            break

    if not fresh:
        return Selection(events=[], cursor=cursor, advanced=False)

    if len(fresh) == len(events) and cursor is not None:
        log.warning(
            "Every ticket in the page of %d is new; older tickets since %d may be missed",
            len(events), cursor,
        )

    # Stable sort: ascending by time, ties keep the order the source gave.
    fresh.sort(key=lambda e: e.timestamp)
    return Selection(events=fresh, cursor=events[0].timestamp, advanced=True)
