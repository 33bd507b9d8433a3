from dataclasses import asdict
from datetime import datetime, timezone
from decimal import Decimal

from conftest import make_line
from tablepos import events
from tablepos.models import PaymentAttempt, PaymentMethod
from tablepos.payment import PaymentValidator, is_card_digits, parse_amount

D = Decimal


def cash(tendered, tip="0"):
    return PaymentAttempt(method=PaymentMethod.CASH, amount_tendered=D(tendered), tip=D(tip))


def test_cash_covering_total_is_valid_with_change(bus):
    validator = PaymentValidator(D("32.40"), bus=bus)
    attempt = cash("40.00")

    assert validator.validate(attempt) is True
    assert validator.change_due(attempt) == D("7.60")


def test_cash_short_of_total_is_invalid(bus):
    validator = PaymentValidator(D("32.40"), bus=bus)

    assert validator.validate(cash("30.00")) is False
    assert validator.remaining(cash("30.00")) == D("2.40")


def test_exact_cash_is_valid_with_no_change(bus):
    validator = PaymentValidator(D("32.40"), bus=bus)

    assert validator.validate(cash("32.40")) is True
    assert validator.change_due(cash("32.40")) == 0


def test_tip_is_added_to_amount_due(bus):
    validator = PaymentValidator(D("32.40"), bus=bus)

    assert validator.total_with_tip(cash("0", tip="5.00")) == D("37.40")
    assert validator.validate(cash("35.00", tip="5.00")) is False
    assert validator.validate(cash("37.40", tip="5.00")) is True


def test_negative_tip_is_invalid(bus):
    validator = PaymentValidator(D("10.00"), bus=bus)

    assert validator.validate(cash("50.00", tip="-1")) is False


def test_amount_due_is_the_displayed_cent_amount(bus):
    rounds_up = PaymentValidator(D("18.45828"), bus=bus)
    rounds_down = PaymentValidator(D("18.454"), bus=bus)

    assert rounds_up.total_with_tip(cash("0")) == D("18.46")
    assert rounds_up.validate(cash("18.45")) is False
    assert rounds_up.validate(cash("18.46")) is True

    assert rounds_down.total_with_tip(cash("0")) == D("18.45")
    assert rounds_down.validate(cash("18.44")) is False
    assert rounds_down.validate(cash("18.45")) is True
    assert rounds_down.change_due(cash("18.45")) == 0


def test_tip_fractions_round_with_the_total(bus):
    validator = PaymentValidator(D("10.004"), bus=bus)

    assert validator.total_with_tip(cash("0", tip="0.005")) == D("10.01")


def test_split_payment_must_cover_total(bus):
    validator = PaymentValidator(D("50.00"), bus=bus)
    short = PaymentAttempt(method=PaymentMethod.SPLIT, split_cash=D("20.00"), split_card=D("29.99"))
    enough = PaymentAttempt(method=PaymentMethod.SPLIT, split_cash=D("20.00"), split_card=D("30.00"))

    assert validator.validate(short) is False
    assert validator.remaining(short) == D("0.01")
    assert validator.validate(enough) is True


def test_card_requires_exactly_four_digits(bus):
    validator = PaymentValidator(D("50.00"), bus=bus)

    for digits, expected in (("1234", True), ("123", False), ("12345", False), ("12a4", False), ("", False)):
        attempt = PaymentAttempt(method=PaymentMethod.CARD, card_last4=digits)
        assert validator.validate(attempt) is expected, digits


def test_rejection_leaves_attempt_untouched_and_emits(bus):
    validator = PaymentValidator(D("32.40"), bus=bus)
    attempt = cash("30.00", tip="2.00")
    attempt.notes = "window seat"
    before = asdict(attempt)

    assert validator.accept(attempt) is None

    assert asdict(attempt) == before
    assert bus.names() == [events.PAYMENT_REJECTED]


def test_accepted_cash_payment_details(ledger, bus):
    ledger.add_line(make_line("a", "10.00", 3))
    validator = PaymentValidator.for_ledger(ledger, bus=bus)
    paid_at = datetime(2026, 10, 18, 19, 30, tzinfo=timezone.utc)

    details = validator.accept(cash("40.00", tip="2.00"), paid_at=paid_at)

    assert details.method is PaymentMethod.CASH
    assert details.subtotal == D("30.00")
    assert details.tax == D("2.4000")
    assert details.total == D("34.40")
    assert details.tip == D("2.00")
    assert details.amount_tendered == D("40.00")
    assert details.change_due == D("5.60")
    assert details.card_last4 is None
    assert details.paid_at == paid_at
    assert [line.line_id for line in details.lines] == ["a"]
    assert events.PAYMENT_ACCEPTED in bus.names()


def test_accepted_card_and_split_details(bus):
    validator = PaymentValidator(D("20.00"), bus=bus)

    card = validator.accept(PaymentAttempt(method=PaymentMethod.CARD, card_last4="4242", card_type="Amex"))
    split = validator.accept(
        PaymentAttempt(method=PaymentMethod.SPLIT, split_cash=D("5"), split_card=D("15"), notes=" thanks ")
    )

    assert (card.card_last4, card.card_type, card.amount_tendered) == ("4242", "Amex", None)
    assert (split.split_cash, split.split_card, split.notes) == (D("5"), D("15"), "thanks")


def test_for_ledger_ignores_cancelled_lines(ledger, bus):
    ledger.add_line(make_line("a", "10.00"))
    ledger.add_line(make_line("b", "99.00"))
    ledger.submit()
    ledger.update_line("b", status="cancelled")

    validator = PaymentValidator.for_ledger(ledger, bus=bus)

    assert validator.order_total == D("10.80")
    assert [line.line_id for line in validator.lines] == ["a"]


def test_parse_amount_is_forgiving():
    assert parse_amount("12.50") == D("12.50")
    assert parse_amount(" $1,000 ") == D("1000")
    assert parse_amount("") == 0
    assert parse_amount("abc") == 0
    assert parse_amount("nan") == 0


def test_card_digit_check():
    assert is_card_digits("0000")
    assert not is_card_digits("\u0661\u0662\u0663\u0664")
    assert not is_card_digits(" 123")
