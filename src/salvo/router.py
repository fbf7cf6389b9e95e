"""Deliver GameSession output to the transport layer.

The router lives *outside* GameSession so that the engine stays free of I/O.
The transport supplies one ``deliver(recipient, event)`` callable; the router
fans each Outbound out to its recipients and keeps a failing recipient from
blocking delivery to the rest.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from .events import Category, Outbound, OutboundEvent

logger = logging.getLogger(__name__)

Deliver = Callable[[str, OutboundEvent], None]


class EventRouter:
    """Fan out Outbound values to ``deliver`` calls."""

    def __init__(self, deliver: Deliver) -> None:
        self._deliver = deliver

    # ------------------------------------------------------------------
    # Public dispatch entry
    # ------------------------------------------------------------------
    def __call__(self, batch: Iterable[Outbound]) -> int:
        """Deliver every event in *batch*; return the number of successful deliveries."""
        delivered = 0
        for outbound in batch:
            delivered += self.dispatch(outbound)
        return delivered

    def dispatch(self, outbound: Outbound) -> int:
        ev = outbound.event
        if ev.category is Category.SYSTEM:
            logger.debug("Error event %s -> %s", ev, outbound.recipients)
        delivered = 0
        for recipient in outbound.recipients:
            try:
                self._deliver(recipient, ev)
            except Exception:  # noqa: BLE001
                logger.exception("Event delivery failed for %s -> %s", ev.type, recipient)
                continue
            delivered += 1
        return delivered
