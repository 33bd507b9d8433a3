"""Table lifecycle and occupied-time display."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable

from tablepos.events import TABLE_STATUS_CHANGED, EventBus, event_bus
from tablepos.models import Table, TableStatus

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def occupied_minutes(since: datetime, now: datetime | None = None) -> int:
    """Whole minutes elapsed since `since`, never negative."""
    now = now or _utc_now()
    return max(0, int((now - since).total_seconds() // 60))


def format_duration(minutes: int) -> str:
    """`40m` under an hour, otherwise `1h 35m`."""
    if minutes < 60:
        return f"{minutes}m"
    hours, remaining = divmod(minutes, 60)
    return f"{hours}h {remaining}m"


def occupied_label(table: Table, now: datetime | None = None) -> str:
    if table.occupied_since is None:
        return ""
    return format_duration(occupied_minutes(table.occupied_since, now))


class FloorPlan:
    """Tables keyed by number; each change swaps in a new Table record."""

    def __init__(self, tables: Iterable[Table], bus: EventBus | None = None) -> None:
        self._tables: dict[int, Table] = {table.number: table for table in tables}
        self._bus = bus if bus is not None else event_bus

    def tables(self) -> list[Table]:
        return [self._tables[number] for number in sorted(self._tables)]

    def get(self, number: int) -> Table | None:
        return self._tables.get(number)

    def status_counts(self) -> dict[TableStatus, int]:
        counts = Counter(table.status for table in self._tables.values())
        return {status: counts.get(status, 0) for status in TableStatus}

    def _set(self, table: Table, **changes: object) -> Table:
        updated = replace(table, **changes)
        self._tables = {**self._tables, table.number: updated}
        if updated.status is not table.status:
            logger.info("table=%s %s -> %s", table.number, table.status.value, updated.status.value)
            self._bus.emit(
                TABLE_STATUS_CHANGED,
                {"table": table.number, "from": table.status, "to": updated.status},
            )
        return updated

    def transition(self, number: int, target: TableStatus, now: datetime | None = None) -> Table | None:
        """Set a table's status. Unknown tables are ignored.

        Any status may follow any other; the caller decides when a table moves.
        Leaving `available` stamps `occupied_since`, returning to it clears the
        stamp, the server and the reservation link.
        """
        target = TableStatus(target)
        table = self._tables.get(number)
        if table is None:
            logger.debug("transition for unknown table=%s", number)
            return None
        if target is table.status:
            return table
        if target is TableStatus.AVAILABLE:
            return self._set(table, status=target, occupied_since=None, server=None, reservation_id=None)
        if table.occupied_since is None:
            return self._set(table, status=target, occupied_since=now or _utc_now())
        return self._set(table, status=target)

    def seat(
        self,
        number: int,
        server: str | None = None,
        reservation_id: str | None = None,
        now: datetime | None = None,
    ) -> Table | None:
        table = self.transition(number, TableStatus.OCCUPIED, now=now)
        if table is None:
            return None
        changes: dict[str, object] = {}
        if server is not None:
            changes["server"] = server
        if reservation_id is not None:
            changes["reservation_id"] = reservation_id
        return self._set(table, **changes) if changes else table

    def start_ordering(self, number: int) -> Table | None:
        return self.transition(number, TableStatus.ORDERING)

    def mark_served(self, number: int) -> Table | None:
        return self.transition(number, TableStatus.SERVED)

    def request_payment(self, number: int) -> Table | None:
        return self.transition(number, TableStatus.PAYING)

    def release(self, number: int) -> Table | None:
        return self.transition(number, TableStatus.AVAILABLE)

    def assign_server(self, number: int, server: str | None) -> Table | None:
        table = self._tables.get(number)
        if table is None:
            return None
        return self._set(table, server=server)
