from datetime import date, datetime, timezone
from decimal import Decimal

from conftest import make_line
from tablepos.models import ItemStatus, PaymentDetails, PaymentMethod
from tablepos.reporting import build_report

D = Decimal


def payment(day, method, lines, tip="0"):
    subtotal = sum((line.line_total for line in lines if line.status is not ItemStatus.CANCELLED), D("0"))
    tax = subtotal * D("0.08")
    return PaymentDetails(
        method=method,
        subtotal=subtotal,
        tax=tax,
        tip=D(tip),
        total=subtotal + tax + D(tip),
        paid_at=datetime(2026, 10, day, 20, 0, tzinfo=timezone.utc),
        lines=tuple(lines),
    )


PAYMENTS = [
    payment(
        17,
        PaymentMethod.CASH,
        [
            make_line("a", "14.49", 2, name="Classic Burger", category="mains"),
            make_line("b", "4.99", 1, name="French Fries", category="sides"),
        ],
        tip="3.00",
    ),
    payment(
        18,
        PaymentMethod.CARD,
        [
            make_line("c", "14.49", 1, name="Classic Burger", category="mains"),
            make_line("d", "2.99", 2, name="Iced Tea", category="drinks"),
            make_line("e", "6.99", 1, name="Cheesecake", category="desserts", status=ItemStatus.CANCELLED),
        ],
    ),
    payment(20, PaymentMethod.SPLIT, [make_line("f", "7.49", 1, name="Lava Cake", category="desserts")]),
]


def test_report_over_date_range_is_inclusive():
    report = build_report(PAYMENTS, start=date(2026, 10, 17), end=date(2026, 10, 18))

    assert report.order_count == 2
    assert report.items_sold == 6
    assert report.net_sales == D("54.44")
    assert report.tips == D("3.00")
    assert report.average_order_value == D("27.22")


def test_top_items_by_revenue_skip_cancelled_lines():
    report = build_report(PAYMENTS, top=2)

    assert [(row.name, row.quantity, row.revenue) for row in report.top_items] == [
        ("Classic Burger", 3, D("43.47")),
        ("Lava Cake", 1, D("7.49")),
    ]
    assert "Cheesecake" not in [row.name for row in build_report(PAYMENTS).top_items]


def test_sales_by_category_and_method():
    report = build_report(PAYMENTS)

    assert report.sales_by_category[0] == ("mains", D("43.47"))
    assert dict(report.sales_by_category)["desserts"] == D("7.49")
    assert set(report.collected_by_method) == {PaymentMethod.CASH, PaymentMethod.CARD, PaymentMethod.SPLIT}


def test_empty_report():
    report = build_report([], start=date(2026, 1, 1))

    assert report.order_count == 0
    assert report.average_order_value == 0
    assert report.top_items == ()
