"""Change notifications for order lines, payments, tables and reservations."""

from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

LINE_ADDED = "line.added"
LINE_REMOVED = "line.removed"
LINE_UPDATED = "line.updated"
LINE_STATUS_CHANGED = "line.status_changed"
ORDER_SUBMITTED = "order.submitted"
PAYMENT_ACCEPTED = "payment.accepted"
PAYMENT_REJECTED = "payment.rejected"
TABLE_STATUS_CHANGED = "table.status_changed"
RESERVATION_CREATED = "reservation.created"
RESERVATION_UPDATED = "reservation.updated"

EVENT_NAMES = frozenset(
    {
        LINE_ADDED,
        LINE_REMOVED,
        LINE_UPDATED,
        LINE_STATUS_CHANGED,
        ORDER_SUBMITTED,
        PAYMENT_ACCEPTED,
        PAYMENT_REJECTED,
        TABLE_STATUS_CHANGED,
        RESERVATION_CREATED,
        RESERVATION_UPDATED,
    }
)

Payload = dict[str, Any]
Handler = Callable[[Payload], None]


def _check_name(event_name: str) -> None:
    if event_name not in EVENT_NAMES:
        raise ValueError(f"unknown event {event_name!r}")


class EventBus:
    """Synchronous fan-out of change payloads to subscribed handlers.

    Handlers run in subscription order on the emitting call. A handler that
    raises is logged and skipped; the change that emitted the event stands.
    Event names are restricted to the constants above.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}

    def subscribe(self, event_name: str, handler: Handler) -> Callable[[], None]:
        """Register `handler`; returns a callable that unsubscribes it."""
        _check_name(event_name)
        self._handlers.setdefault(event_name, []).append(handler)
        return lambda: self.unsubscribe(event_name, handler)

    def unsubscribe(self, event_name: str, handler: Handler) -> None:
        handlers = self._handlers.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event_name: str, payload: Payload) -> int:
        """Deliver `payload` to every handler of `event_name`; returns how many succeeded."""
        _check_name(event_name)
        delivered = 0
        for handler in tuple(self._handlers.get(event_name, ())):
            try:
                handler(payload)
            except Exception:
                logger.exception("%s handler %r failed", event_name, handler)
                continue
            delivered += 1
        if not delivered:
            logger.debug("%s delivered to no handler", event_name)
        return delivered


event_bus = EventBus()
