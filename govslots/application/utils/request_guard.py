from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable


@dataclass(frozen=True)
class RequestTicket:
    seq: int
    snapshot: Hashable


class LatestRequestGuard:
    """
    Tags fetches with the filter snapshot they were issued for.
    A response is applied only if its snapshot still matches the current
    filter and nothing newer has been applied already.
    """

    def __init__(self) -> None:
        self._issued = 0
        self._applied = 0
        self._closed = False

    def issue(self, snapshot: Hashable) -> RequestTicket:
        self._issued += 1
        return RequestTicket(seq=self._issued, snapshot=snapshot)

    def is_current(self, ticket: RequestTicket, current_snapshot: Hashable) -> bool:
        if self._closed:
            return False
        if ticket.snapshot != current_snapshot:
            return False
        return ticket.seq > self._applied

    def accept(self, ticket: RequestTicket, current_snapshot: Hashable) -> bool:
        """Check the ticket and, if current, record it as applied."""
        if not self.is_current(ticket, current_snapshot):
            return False
        self._applied = ticket.seq
        return True

    def is_latest(self, ticket: RequestTicket) -> bool:
        return ticket.seq == self._issued

    def close(self) -> None:
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed
