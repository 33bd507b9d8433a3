from decimal import Decimal

import pytest

from tablepos.data import build_catalog
from tablepos.events import EventBus
from tablepos.ledger import OrderLedger
from tablepos.models import OrderLine


class RecordingBus(EventBus):
    def __init__(self):
        super().__init__()
        self.events = []

    def emit(self, event_name, payload):
        self.events.append((event_name, payload))
        return super().emit(event_name, payload)

    def names(self):
        return [name for name, _ in self.events]


@pytest.fixture
def catalog():
    return build_catalog()


@pytest.fixture
def bus():
    return RecordingBus()


@pytest.fixture
def ledger(bus):
    return OrderLedger(table_number=4, server="Jane Server", bus=bus)


def make_line(line_id, price="10.00", quantity=1, **kwargs):
    return OrderLine(
        line_id=line_id,
        item_id=kwargs.pop("item_id", line_id),
        name=kwargs.pop("name", f"Item {line_id}"),
        unit_price=Decimal(price),
        quantity=quantity,
        **kwargs,
    )
