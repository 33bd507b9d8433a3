"""Order line lifecycle: kitchen status transitions and fire/hold tags."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from tablepos.models import ItemStatus, OrderLine, PriorityTag

if TYPE_CHECKING:
    from tablepos.ledger import OrderLedger

logger = logging.getLogger(__name__)

ITEM_TRANSITIONS: dict[ItemStatus, frozenset[ItemStatus]] = {
    ItemStatus.PENDING: frozenset({ItemStatus.PREPARING, ItemStatus.CANCELLED}),
    ItemStatus.PREPARING: frozenset({ItemStatus.READY, ItemStatus.CANCELLED}),
    ItemStatus.READY: frozenset({ItemStatus.DELIVERED, ItemStatus.CANCELLED}),
    ItemStatus.DELIVERED: frozenset(),
    ItemStatus.CANCELLED: frozenset(),
}

# Forward step offered to kitchen staff for each status.
_NEXT_STATUS: dict[ItemStatus, ItemStatus] = {
    ItemStatus.PENDING: ItemStatus.PREPARING,
    ItemStatus.PREPARING: ItemStatus.READY,
    ItemStatus.READY: ItemStatus.DELIVERED,
}

TAGGABLE_STATUSES = frozenset({ItemStatus.PENDING, ItemStatus.PREPARING})


def allowed_transitions(status: ItemStatus) -> frozenset[ItemStatus]:
    return ITEM_TRANSITIONS[status]


def can_transition(current: ItemStatus, target: ItemStatus) -> bool:
    return target in ITEM_TRANSITIONS[current]


def next_status(status: ItemStatus) -> ItemStatus | None:
    return _NEXT_STATUS.get(status)


def is_terminal(status: ItemStatus) -> bool:
    return not ITEM_TRANSITIONS[status]


def next_priority(tag: PriorityTag | None) -> PriorityTag | None:
    """Cycle fire -> hold -> cleared -> fire."""
    if tag is None:
        return PriorityTag.FIRE
    if tag is PriorityTag.FIRE:
        return PriorityTag.HOLD
    return None


def advance(ledger: "OrderLedger", line_id: str, served_by: str | None = None) -> OrderLine | None:
    """Move a line one step forward. Delivering records `served_by` or the ledger's server."""
    line = ledger.find(line_id)
    if line is None:
        return None
    target = next_status(line.status)
    if target is None:
        logger.debug("line %s is %s; nothing to advance", line_id, line.status.value)
        return line
    if target is ItemStatus.DELIVERED:
        return ledger.update_line(line_id, status=target, served_by=served_by)
    return ledger.update_line(line_id, status=target)


def cancel(ledger: "OrderLedger", line_id: str) -> OrderLine | None:
    line = ledger.find(line_id)
    if line is None:
        return None
    if is_terminal(line.status):
        return line
    return ledger.update_line(line_id, status=ItemStatus.CANCELLED)


def toggle_priority(ledger: "OrderLedger", line_id: str) -> OrderLine | None:
    """Toggle the fire/hold tag of a pending or preparing line; other lines are left alone."""
    line = ledger.find(line_id)
    if line is None:
        return None
    if line.status not in TAGGABLE_STATUSES:
        return line
    return ledger.update_line(line_id, priority=next_priority(line.priority))


def _queue_rank(line: OrderLine) -> int:
    if line.priority is PriorityTag.FIRE:
        return 0
    if line.priority is PriorityTag.HOLD:
        return 2
    return 1


def kitchen_queue(
    ledgers: Iterable["OrderLedger"],
    status: ItemStatus | None = None,
) -> list[tuple["OrderLedger", OrderLine]]:
    """Active lines across ledgers for the kitchen display.

    Fired lines sort first, held lines last, otherwise ledger and insertion
    order is kept. Delivered and cancelled lines are excluded unless asked
    for explicitly by `status`.
    """
    rows: list[tuple[int, int, "OrderLedger", OrderLine]] = []
    seq = 0
    for ledger in ledgers:
        for line in ledger.submitted_lines():
            if status is None and is_terminal(line.status):
                continue
            if status is not None and line.status is not status:
                continue
            rows.append((_queue_rank(line), seq, ledger, line))
            seq += 1
    rows.sort(key=lambda row: (row[0], row[1]))
    return [(ledger, line) for _, _, ledger, line in rows]
