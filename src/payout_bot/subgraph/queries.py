"""GraphQL documents for the Livepeer subgraph."""

from __future__ import annotations

WINNING_TICKETS_QUERY = """
query WinningTickets($first: Int!) {
  winningTicketRedeemedEvents(
    first: $first
    orderDirection: desc
    orderBy: timestamp
  ) {
    timestamp
    faceValue
    faceValueUSD
    recipient {
      id
    }
    sender {
      id
    }
    transaction {
      id
    }
  }
}
"""
