"""Open checks per table, tied to the table's seating."""

from __future__ import annotations

import logging
from decimal import Decimal

from tablepos.config import DEFAULT_SERVER, TAX_RATE
from tablepos.events import EventBus
from tablepos.ledger import OrderLedger
from tablepos.models import Table
from tablepos.tables import FloorPlan

logger = logging.getLogger(__name__)


class TableSessions:
    """One OrderLedger per seated table.

    A ledger lives from the first order at a table until the table is
    released; the next party at that table starts on a fresh ledger with the
    table's current server.
    """

    def __init__(
        self,
        floor: FloorPlan,
        server: str = DEFAULT_SERVER,
        tax_rate: Decimal = TAX_RATE,
        bus: EventBus | None = None,
    ) -> None:
        self.floor = floor
        self.server = server
        self.tax_rate = tax_rate
        self._bus = bus
        self._ledgers: dict[int, OrderLedger] = {}

    def ledger(self, number: int) -> OrderLedger:
        ledger = self._ledgers.get(number)
        if ledger is None:
            table = self.floor.get(number)
            ledger = OrderLedger(
                table_number=number,
                server=(table.server if table else None) or self.server,
                tax_rate=self.tax_rate,
                bus=self._bus,
            )
            self._ledgers[number] = ledger
        return ledger

    def open_ledgers(self) -> list[OrderLedger]:
        """Ledgers of every table with an open check, by table number."""
        return [self._ledgers[number] for number in sorted(self._ledgers)]

    def release(self, number: int) -> Table | None:
        """Free the table and close its check."""
        table = self.floor.release(number)
        closed = self._ledgers.pop(number, None)
        if closed is not None:
            archived = closed.clear()
            logger.info("table=%s check closed with %d line(s)", number, len(archived))
        return table
