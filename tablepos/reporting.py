"""Sales summaries built from accepted payments."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable

from tablepos.models import ZERO, ItemStatus, PaymentDetails, PaymentMethod


@dataclass(frozen=True)
class ItemSales:
    name: str
    quantity: int
    revenue: Decimal


@dataclass(frozen=True)
class SalesReport:
    order_count: int = 0
    items_sold: int = 0
    net_sales: Decimal = ZERO
    tax_collected: Decimal = ZERO
    tips: Decimal = ZERO
    gross_collected: Decimal = ZERO
    top_items: tuple[ItemSales, ...] = ()
    sales_by_category: tuple[tuple[str, Decimal], ...] = ()
    collected_by_method: dict[PaymentMethod, Decimal] = field(default_factory=dict)

    @property
    def average_order_value(self) -> Decimal:
        if not self.order_count:
            return ZERO
        return self.net_sales / self.order_count


def _in_range(paid_on: date, start: date | None, end: date | None) -> bool:
    if start is not None and paid_on < start:
        return False
    if end is not None and paid_on > end:
        return False
    return True


def build_report(
    payments: Iterable[PaymentDetails],
    start: date | None = None,
    end: date | None = None,
    top: int = 5,
) -> SalesReport:
    """Summarize payments whose paid-at date falls within [start, end]."""
    selected = [p for p in payments if _in_range(p.paid_at.date(), start, end)]

    items: dict[str, list] = {}
    categories: dict[str, Decimal] = {}
    by_method: dict[PaymentMethod, Decimal] = {}
    items_sold = 0

    for payment in selected:
        by_method[payment.method] = by_method.get(payment.method, ZERO) + payment.total
        for line in payment.lines:
            if line.status is ItemStatus.CANCELLED:
                continue
            items_sold += line.quantity
            entry = items.setdefault(line.name, [0, ZERO])
            entry[0] += line.quantity
            entry[1] += line.line_total
            category = line.category or "other"
            categories[category] = categories.get(category, ZERO) + line.line_total

    top_items = sorted(
        (ItemSales(name=name, quantity=qty, revenue=revenue) for name, (qty, revenue) in items.items()),
        key=lambda row: (-row.revenue, row.name),
    )[: max(0, top)]

    return SalesReport(
        order_count=len(selected),
        items_sold=items_sold,
        net_sales=sum((p.subtotal for p in selected), ZERO),
        tax_collected=sum((p.tax for p in selected), ZERO),
        tips=sum((p.tip for p in selected), ZERO),
        gross_collected=sum((p.total for p in selected), ZERO),
        top_items=tuple(top_items),
        sales_by_category=tuple(sorted(categories.items(), key=lambda kv: (-kv[1], kv[0]))),
        collected_by_method=by_method,
    )
