"""Payment validation against an order total."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Iterable

from tablepos.events import PAYMENT_ACCEPTED, PAYMENT_REJECTED, EventBus, event_bus
from tablepos.ledger import OrderLedger
from tablepos.models import ZERO, OrderLine, PaymentAttempt, PaymentDetails, PaymentMethod
from tablepos.pricing import round_cents

logger = logging.getLogger(__name__)


def parse_amount(raw: str) -> Decimal:
    """Parse a typed amount; blank or malformed input counts as zero."""
    text = raw.strip().replace(",", "")
    if text.startswith("$"):
        text = text[1:]
    if not text:
        return ZERO
    try:
        value = Decimal(text)
    except InvalidOperation:
        return ZERO
    if not value.is_finite():
        return ZERO
    return value


def is_card_digits(last4: str) -> bool:
    return len(last4) == 4 and last4.isascii() and last4.isdigit()


class PaymentValidator:
    """Checks a PaymentAttempt against an order total.

    Validation is a predicate: nothing here raises for insufficient or
    malformed amounts, and the attempt is never modified.
    """

    def __init__(
        self,
        order_total: Decimal,
        subtotal: Decimal | None = None,
        tax: Decimal | None = None,
        lines: Iterable[OrderLine] = (),
        bus: EventBus | None = None,
    ) -> None:
        self.order_total = order_total
        self.subtotal = subtotal if subtotal is not None else order_total
        self.tax = tax if tax is not None else ZERO
        self.lines = tuple(lines)
        self._bus = bus if bus is not None else event_bus

    @classmethod
    def for_ledger(cls, ledger: OrderLedger, bus: EventBus | None = None) -> "PaymentValidator":
        return cls(
            order_total=ledger.total(),
            subtotal=ledger.subtotal(),
            tax=ledger.tax(),
            lines=ledger.billable_lines(),
            bus=bus,
        )

    def total_with_tip(self, attempt: PaymentAttempt) -> Decimal:
        """Order total plus tip, rounded to the cent as shown to the guest."""
        return round_cents(self.order_total + attempt.tip)

    def change_due(self, attempt: PaymentAttempt) -> Decimal:
        return max(ZERO, attempt.amount_tendered - self.total_with_tip(attempt))

    def validate(self, attempt: PaymentAttempt) -> bool:
        if attempt.tip < 0:
            return False
        due = self.total_with_tip(attempt)
        if attempt.method is PaymentMethod.CASH:
            return attempt.amount_tendered >= due
        if attempt.method is PaymentMethod.CARD:
            return is_card_digits(attempt.card_last4)
        if attempt.method is PaymentMethod.SPLIT:
            return attempt.split_cash + attempt.split_card >= due
        return False

    def remaining(self, attempt: PaymentAttempt) -> Decimal:
        """Amount still uncovered by the entered cash or split amounts."""
        due = self.total_with_tip(attempt)
        if attempt.method is PaymentMethod.CASH:
            return max(ZERO, due - attempt.amount_tendered)
        if attempt.method is PaymentMethod.SPLIT:
            return max(ZERO, due - attempt.split_cash - attempt.split_card)
        return ZERO

    def accept(self, attempt: PaymentAttempt, paid_at: datetime | None = None) -> PaymentDetails | None:
        """Return the settled PaymentDetails, or None when the attempt is not valid."""
        if not self.validate(attempt):
            logger.info("payment rejected method=%s due=%s", attempt.method.value, self.total_with_tip(attempt))
            self._bus.emit(PAYMENT_REJECTED, {"method": attempt.method, "due": self.total_with_tip(attempt)})
            return None

        details = PaymentDetails(
            method=attempt.method,
            subtotal=self.subtotal,
            tax=self.tax,
            tip=attempt.tip,
            total=self.total_with_tip(attempt),
            paid_at=paid_at or datetime.now(timezone.utc),
            notes=attempt.notes.strip(),
            lines=self.lines,
        )
        if attempt.method is PaymentMethod.CASH:
            details = replace(details, amount_tendered=attempt.amount_tendered, change_due=self.change_due(attempt))
        elif attempt.method is PaymentMethod.CARD:
            details = replace(details, card_last4=attempt.card_last4, card_type=attempt.card_type)
        else:
            details = replace(details, split_cash=attempt.split_cash, split_card=attempt.split_card)

        logger.info("payment accepted method=%s total=%s tip=%s", details.method.value, details.total, details.tip)
        self._bus.emit(PAYMENT_ACCEPTED, {"method": details.method, "total": details.total, "details": details})
        return details
