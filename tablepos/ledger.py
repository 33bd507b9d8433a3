"""Order ledger for one table session."""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Any
from uuid import uuid4

from tablepos import kitchen
from tablepos.catalog import Catalog
from tablepos.config import DEFAULT_SERVER, TAX_RATE
from tablepos.errors import IllegalTransition
from tablepos.events import (
    LINE_ADDED,
    LINE_REMOVED,
    LINE_STATUS_CHANGED,
    LINE_UPDATED,
    ORDER_SUBMITTED,
    EventBus,
    event_bus,
)
from tablepos.models import ZERO, ItemStatus, MenuItem, OrderLine, PriorityTag
from tablepos.pricing import check_commit, price_selection
from tablepos.selection import Selection

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"status", "served_by", "priority", "notes"})


class OrderLedger:
    """Ordered order lines for one table or check.

    Every mutation builds a new tuple of lines and swaps it in, so callers
    holding an earlier `lines` snapshot never see it change.
    """

    def __init__(
        self,
        table_number: int | None = None,
        server: str = DEFAULT_SERVER,
        tax_rate: Decimal = TAX_RATE,
        bus: EventBus | None = None,
    ) -> None:
        self.table_number = table_number
        self.server = server
        self.tax_rate = tax_rate
        self._bus = bus if bus is not None else event_bus
        self._lines: tuple[OrderLine, ...] = ()
        self._submitted_ids: frozenset[str] = frozenset()

    @property
    def lines(self) -> tuple[OrderLine, ...]:
        return self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def find(self, line_id: str) -> OrderLine | None:
        for line in self._lines:
            if line.line_id == line_id:
                return line
        return None

    def is_submitted(self, line_id: str) -> bool:
        return line_id in self._submitted_ids

    def submitted_lines(self) -> list[OrderLine]:
        return [line for line in self._lines if line.line_id in self._submitted_ids]

    def pending_submission(self) -> list[OrderLine]:
        return [line for line in self._lines if line.line_id not in self._submitted_ids]

    def _new_line_id(self) -> str:
        while True:
            line_id = uuid4().hex[:8]
            if self.find(line_id) is None:
                return line_id

    def _emit(self, event_name: str, payload: dict[str, Any]) -> None:
        payload.setdefault("table", self.table_number)
        self._bus.emit(event_name, payload)

    def commit(self, item: MenuItem, selection: Selection, catalog: Catalog | None = None) -> OrderLine:
        """Validate and price a selection, then append it as a new pending line."""
        check_commit(item, selection)
        priced = price_selection(item, selection, catalog)
        line = OrderLine(
            line_id=self._new_line_id(),
            item_id=item.item_id,
            name=item.name,
            unit_price=priced.unit_price,
            quantity=priced.quantity,
            category=item.category,
            modifiers=priced.labels,
            notes=selection.notes.strip(),
        )
        return self.add_line(line)

    def add_line(self, line: OrderLine) -> OrderLine:
        if self.find(line.line_id) is not None:
            raise ValueError(f"line id {line.line_id!r} already exists in this ledger")
        self._lines = self._lines + (line,)
        logger.info("table=%s add line=%s %dx %s", self.table_number, line.line_id, line.quantity, line.name)
        self._emit(LINE_ADDED, {"line_id": line.line_id, "line": line})
        return line

    def remove_line(self, line_id: str) -> bool:
        """Remove a line not yet sent to the kitchen. Unknown ids are ignored."""
        if self.find(line_id) is None:
            logger.debug("table=%s remove unknown line=%s", self.table_number, line_id)
            return False
        if line_id in self._submitted_ids:
            logger.info("table=%s line=%s already submitted; cancel it instead", self.table_number, line_id)
            return False
        self._lines = tuple(line for line in self._lines if line.line_id != line_id)
        logger.info("table=%s remove line=%s", self.table_number, line_id)
        self._emit(LINE_REMOVED, {"line_id": line_id})
        return True

    def update_line(self, line_id: str, **changes: Any) -> OrderLine | None:
        """Replace fields of one line. Unknown ids are ignored.

        Status changes must follow the kitchen transition table; delivering a
        line records `served_by`, defaulting to the ledger's server. Fire/hold
        tags are only accepted on pending or preparing lines.
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"cannot update {', '.join(sorted(unknown))}")

        current = self.find(line_id)
        if current is None:
            logger.debug("table=%s update unknown line=%s", self.table_number, line_id)
            return None

        if changes.get("served_by") is None:
            changes.pop("served_by", None)

        if changes.get("priority") is not None:
            changes["priority"] = PriorityTag(changes["priority"])
            resulting = ItemStatus(changes.get("status", current.status))
            if resulting not in kitchen.TAGGABLE_STATUSES:
                raise ValueError(
                    f"line {line_id!r} is {resulting.value}; only pending or preparing lines take fire/hold"
                )

        status = changes.get("status")
        if status is not None:
            status = ItemStatus(status)
            changes["status"] = status
            if status is not current.status:
                if not kitchen.can_transition(current.status, status):
                    raise IllegalTransition(line_id, current.status.value, status.value)
                if status is ItemStatus.DELIVERED and "served_by" not in changes:
                    changes["served_by"] = current.served_by or self.server
                if status not in kitchen.TAGGABLE_STATUSES:
                    changes["priority"] = None

        updated = replace(current, **changes)
        self._lines = tuple(updated if line.line_id == line_id else line for line in self._lines)

        if updated.status is not current.status:
            logger.info(
                "table=%s line=%s %s -> %s",
                self.table_number,
                line_id,
                current.status.value,
                updated.status.value,
            )
            self._emit(
                LINE_STATUS_CHANGED,
                {
                    "line_id": line_id,
                    "from": current.status,
                    "to": updated.status,
                    "served_by": updated.served_by,
                },
            )
        self._emit(LINE_UPDATED, {"line_id": line_id, "changes": dict(changes)})
        return updated

    def submit(self) -> list[OrderLine]:
        """Send every unsubmitted line to the kitchen and return them."""
        fresh = self.pending_submission()
        if not fresh:
            return []
        self._submitted_ids = self._submitted_ids | {line.line_id for line in fresh}
        logger.info("table=%s submit %d line(s)", self.table_number, len(fresh))
        self._emit(ORDER_SUBMITTED, {"line_ids": [line.line_id for line in fresh]})
        return fresh

    def billable_lines(self) -> list[OrderLine]:
        return [line for line in self._lines if line.status is not ItemStatus.CANCELLED]

    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self.billable_lines()), ZERO)

    def tax(self) -> Decimal:
        return self.subtotal() * self.tax_rate

    def total(self) -> Decimal:
        return self.subtotal() + self.tax()

    def item_count(self) -> int:
        return sum(line.quantity for line in self.billable_lines())

    def clear(self) -> tuple[OrderLine, ...]:
        """Archive the ledger after payment: return all lines and start empty."""
        archived = self._lines
        self._lines = ()
        self._submitted_ids = frozenset()
        logger.info("table=%s ledger cleared (%d line(s) archived)", self.table_number, len(archived))
        return archived
