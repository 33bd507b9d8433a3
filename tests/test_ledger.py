from decimal import Decimal

import pytest

from conftest import make_line
from tablepos import events
from tablepos.errors import IllegalTransition, InvalidSelection
from tablepos.models import ItemStatus, PriorityTag
from tablepos.selection import Selection

TAX_FACTOR = Decimal("1.08")


def test_totals_follow_flat_tax(ledger):
    ledger.add_line(make_line("a", "12.99", 2))
    ledger.add_line(make_line("b", "3.50", 3))

    assert ledger.subtotal() == Decimal("36.48")
    assert ledger.tax() == Decimal("36.48") * Decimal("0.08")
    assert ledger.total() == ledger.subtotal() * TAX_FACTOR


def test_total_invariant_holds_after_every_mutation(ledger):
    steps = [
        lambda: ledger.add_line(make_line("a", "8.99")),
        lambda: ledger.add_line(make_line("b", "17.091", 2)),
        lambda: ledger.remove_line("a"),
        lambda: ledger.remove_line("missing"),
        lambda: ledger.add_line(make_line("c", "2.99", 4)),
        lambda: ledger.submit(),
        lambda: ledger.update_line("c", status=ItemStatus.CANCELLED),
        lambda: ledger.update_line("b", served_by="Sam"),
    ]
    for step in steps:
        step()
        assert ledger.total() == ledger.subtotal() * TAX_FACTOR


def test_empty_ledger_totals_are_zero(ledger):
    assert ledger.subtotal() == 0
    assert ledger.total() == 0
    assert ledger.item_count() == 0


def test_removing_unknown_line_is_a_no_op(ledger, bus):
    ledger.add_line(make_line("a", "5.00"))
    before_lines = ledger.lines
    before_subtotal = ledger.subtotal()
    bus.events.clear()

    assert ledger.remove_line("nope") is False

    assert ledger.lines == before_lines
    assert ledger.subtotal() == before_subtotal
    assert bus.events == []


def test_lines_keep_insertion_order(ledger):
    for line_id in ("c", "a", "b"):
        ledger.add_line(make_line(line_id))

    ledger.remove_line("a")

    assert [line.line_id for line in ledger.lines] == ["c", "b"]


def test_mutation_swaps_in_new_sequence(ledger):
    ledger.add_line(make_line("a"))
    snapshot = ledger.lines

    ledger.add_line(make_line("b"))
    ledger.update_line("a", notes="no ice")

    assert len(snapshot) == 1
    assert snapshot[0].notes == ""
    assert ledger.find("a").notes == "no ice"


def test_duplicate_line_id_is_rejected(ledger):
    ledger.add_line(make_line("a"))

    with pytest.raises(ValueError):
        ledger.add_line(make_line("a"))


def test_cancelled_lines_are_excluded_from_totals(ledger):
    ledger.add_line(make_line("a", "10.00", 2))
    ledger.add_line(make_line("b", "5.00"))
    ledger.submit()

    ledger.update_line("b", status=ItemStatus.CANCELLED)

    assert ledger.subtotal() == Decimal("20.00")
    assert ledger.item_count() == 2
    assert [line.line_id for line in ledger.billable_lines()] == ["a"]


def test_submitted_lines_cannot_be_removed(ledger):
    ledger.add_line(make_line("a"))
    ledger.submit()
    ledger.add_line(make_line("b"))

    assert ledger.remove_line("a") is False
    assert ledger.remove_line("b") is True
    assert [line.line_id for line in ledger.lines] == ["a"]


def test_submit_only_sends_new_lines(ledger, bus):
    ledger.add_line(make_line("a"))
    assert [line.line_id for line in ledger.submit()] == ["a"]

    ledger.add_line(make_line("b"))
    assert [line.line_id for line in ledger.submit()] == ["b"]
    assert ledger.submit() == []
    assert bus.names().count(events.ORDER_SUBMITTED) == 2


def test_update_unknown_line_returns_none(ledger):
    assert ledger.update_line("ghost", served_by="Sam") is None


def test_update_rejects_unknown_fields(ledger):
    ledger.add_line(make_line("a"))

    with pytest.raises(ValueError):
        ledger.update_line("a", unit_price=Decimal("0"))


def test_update_rejects_skipped_status(ledger):
    ledger.add_line(make_line("a"))

    with pytest.raises(IllegalTransition):
        ledger.update_line("a", status=ItemStatus.DELIVERED)
    assert ledger.find("a").status is ItemStatus.PENDING


def test_delivery_defaults_served_by_to_ledger_server(ledger):
    ledger.add_line(make_line("a"))
    ledger.update_line("a", status="preparing")
    ledger.update_line("a", status="ready")

    delivered = ledger.update_line("a", status="delivered")

    assert delivered.status is ItemStatus.DELIVERED
    assert delivered.served_by == "Jane Server"


def test_commit_freezes_price_and_labels(ledger, catalog):
    pizza = catalog.find_item("margherita_pizza")
    selection = Selection.fresh(pizza)
    selection.choose_variant("medium")
    selection.toggle_option("toppings", "olives")
    selection.set_quantity(2)
    selection.notes = "  well done "

    line = ledger.commit(pizza, selection, catalog)

    assert line.unit_price == Decimal("13.99")
    assert line.quantity == 2
    assert line.modifiers == ("Classic", "Olives (+$1.00)")
    assert line.notes == "well done"
    assert line.status is ItemStatus.PENDING
    assert line.category == "main"
    assert ledger.subtotal() == Decimal("27.98")


def test_commit_refuses_invalid_selection(ledger, catalog):
    salmon = catalog.find_item("grilled_salmon")

    with pytest.raises(InvalidSelection):
        ledger.commit(salmon, Selection(item=salmon))
    assert ledger.lines == ()


def test_commit_generates_unique_ids(ledger, catalog):
    tea = catalog.find_item("iced_tea")
    ids = {ledger.commit(tea, Selection.fresh(tea)).line_id for _ in range(20)}

    assert len(ids) == 20


def test_events_carry_line_ids(ledger, bus):
    ledger.add_line(make_line("a"))
    ledger.submit()
    ledger.update_line("a", status=ItemStatus.PREPARING)
    ledger.remove_line("a")

    names = bus.names()
    assert names[:2] == [events.LINE_ADDED, events.ORDER_SUBMITTED]
    assert events.LINE_STATUS_CHANGED in names
    status_payload = dict(bus.events)[events.LINE_STATUS_CHANGED]
    assert status_payload["line_id"] == "a"
    assert status_payload["to"] is ItemStatus.PREPARING
    assert status_payload["table"] == 4


def test_clear_archives_lines(ledger):
    ledger.add_line(make_line("a"))
    ledger.submit()

    archived = ledger.clear()

    assert [line.line_id for line in archived] == ["a"]
    assert ledger.lines == ()
    assert ledger.submitted_lines() == []


def test_fire_hold_only_on_pending_or_preparing_lines(ledger):
    ledger.add_line(make_line("a"))
    ledger.add_line(make_line("b", status=ItemStatus.READY))

    assert ledger.update_line("a", priority=PriorityTag.FIRE).priority is PriorityTag.FIRE
    assert ledger.update_line("a", status=ItemStatus.PREPARING, priority="hold").priority is PriorityTag.HOLD

    with pytest.raises(ValueError):
        ledger.update_line("b", priority=PriorityTag.FIRE)
    with pytest.raises(ValueError):
        ledger.update_line("a", status=ItemStatus.READY, priority=PriorityTag.FIRE)

    assert ledger.find("b").priority is None
    assert ledger.find("a").status is ItemStatus.PREPARING
    assert ledger.update_line("b", priority=None).priority is None
