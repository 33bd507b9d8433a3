from datetime import datetime, timezone
from decimal import Decimal

from conftest import make_line
from tablepos.models import ItemStatus, PaymentDetails, PaymentMethod
from tablepos.printer import SEPARATOR, ReceiptRow, receipt_rows

D = Decimal
PAID_AT = datetime(2026, 10, 18, 19, 5, tzinfo=timezone.utc)


def details(method, **kwargs):
    lines = (
        make_line("a", "13.99", 2, name="Margherita Pizza", modifiers=("Medium", "Olives (+$1.00)"), notes="well done"),
        make_line("b", "6.99", 1, name="Cheesecake", status=ItemStatus.CANCELLED),
    )
    return PaymentDetails(
        method=method,
        subtotal=D("27.98"),
        tax=D("2.2384"),
        tip=kwargs.pop("tip", D("0")),
        total=kwargs.pop("total", D("30.22")),
        paid_at=PAID_AT,
        lines=lines,
        **kwargs,
    )


def test_cash_receipt_layout():
    rows = receipt_rows(
        details(PaymentMethod.CASH, amount_tendered=D("40"), change_due=D("9.78")),
        table_number=4,
    )

    assert rows == [
        ReceiptRow("Table 4"),
        ReceiptRow("2026-10-18 19:05"),
        ReceiptRow(SEPARATOR),
        ReceiptRow("2x Margherita Pizza", "$27.98"),
        ReceiptRow("Medium", indent=True),
        ReceiptRow("Olives (+$1.00)", indent=True),
        ReceiptRow('"well done"', indent=True),
        ReceiptRow(SEPARATOR),
        ReceiptRow("Subtotal", "$27.98"),
        ReceiptRow("Tax", "$2.24"),
        ReceiptRow("TOTAL", "$30.22"),
        ReceiptRow(SEPARATOR),
        ReceiptRow("Cash", "$40.00"),
        ReceiptRow("Change", "$9.78"),
    ]


def test_card_receipt_shows_tip_and_masked_card():
    rows = receipt_rows(
        details(PaymentMethod.CARD, tip=D("5"), total=D("35.22"), card_last4="4242", card_type="Amex", notes="thanks")
    )
    lefts = [row.left for row in rows]

    assert "Table" not in lefts[0]
    assert ReceiptRow("Tip", "$5.00") in rows
    assert rows[-2] == ReceiptRow("Amex ****4242", "$35.22")
    assert rows[-1] == ReceiptRow("thanks")


def test_split_receipt_lists_both_parts():
    rows = receipt_rows(details(PaymentMethod.SPLIT, split_cash=D("10"), split_card=D("20.22")))

    assert rows[-2:] == [ReceiptRow("Cash", "$10.00"), ReceiptRow("Card", "$20.22")]
