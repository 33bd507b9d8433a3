import logging

import pytest

from tablepos.events import LINE_ADDED, LINE_REMOVED, PAYMENT_ACCEPTED, EventBus


def test_handlers_receive_payload_in_order():
    bus = EventBus()
    seen = []
    bus.subscribe(LINE_ADDED, lambda payload: seen.append(("first", payload["line_id"])))
    bus.subscribe(LINE_ADDED, lambda payload: seen.append(("second", payload["line_id"])))

    delivered = bus.emit(LINE_ADDED, {"line_id": "a"})

    assert delivered == 2
    assert seen == [("first", "a"), ("second", "a")]


def test_failing_handler_is_logged_and_others_still_run(caplog):
    bus = EventBus()
    seen = []

    def broken(payload):
        raise RuntimeError("boom")

    bus.subscribe(PAYMENT_ACCEPTED, broken)
    bus.subscribe(PAYMENT_ACCEPTED, seen.append)

    with caplog.at_level(logging.ERROR, logger="tablepos.events"):
        delivered = bus.emit(PAYMENT_ACCEPTED, {"total": 2})

    assert delivered == 1
    assert seen == [{"total": 2}]
    assert "payment.accepted handler" in caplog.text
    assert "boom" in caplog.text


def test_unsubscribe_stops_delivery():
    bus = EventBus()
    seen = []
    cancel = bus.subscribe(LINE_REMOVED, seen.append)
    bus.subscribe(LINE_ADDED, seen.append)
    bus.unsubscribe(LINE_ADDED, seen.append)

    cancel()
    cancel()

    assert bus.emit(LINE_REMOVED, {}) == 0
    assert bus.emit(LINE_ADDED, {}) == 0
    assert seen == []


def test_unknown_event_names_are_rejected():
    bus = EventBus()

    with pytest.raises(ValueError):
        bus.subscribe("line.addded", print)
    with pytest.raises(ValueError):
        bus.emit("order.paid", {})
