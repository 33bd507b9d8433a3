"""Payment entry modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from tablepos.models import PaymentAttempt, PaymentDetails, PaymentMethod
from tablepos.payment import PaymentValidator, parse_amount
from tablepos.pricing import format_money

CARD_TYPES = ("Visa", "Mastercard", "Amex", "Discover")

_FIELDS_BY_METHOD: dict[PaymentMethod, tuple[str, ...]] = {
    PaymentMethod.CASH: ("tip", "amount_tendered", "notes"),
    PaymentMethod.CARD: ("tip", "card_last4", "card_type", "notes"),
    PaymentMethod.SPLIT: ("tip", "split_cash", "split_card", "notes"),
}

_FIELD_LABELS: dict[str, str] = {
    "tip": "Tip",
    "amount_tendered": "Amount tendered",
    "card_last4": "Card last 4",
    "card_type": "Card type",
    "split_cash": "Cash amount",
    "split_card": "Card amount",
    "notes": "Notes",
}

_AMOUNT_FIELDS = frozenset({"tip", "amount_tendered", "split_cash", "split_card"})


class PaymentModal(ModalScreen[PaymentDetails | None]):
    """Collect a payment; the confirm key only works while the entered payment is valid."""

    CSS = """
    PaymentModal {
        align: center middle;
        background: $background 60%;
    }

    #payment-dialog {
        width: 60;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #payment-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #payment-body {
        color: white;
        margin-bottom: 1;
    }

    #payment-status {
        margin-bottom: 1;
    }

    #payment-help {
        color: #dddddd;
    }
    """

    def __init__(self, validator: PaymentValidator) -> None:
        super().__init__()
        self.validator = validator
        self.method = PaymentMethod.CASH
        self.raw: dict[str, str] = {name: "" for name in _FIELD_LABELS}
        self.raw["card_type"] = CARD_TYPES[0]
        self.field_index = 0

    def compose(self) -> ComposeResult:
        with Container(id="payment-dialog"):
            yield Static("Complete Payment", id="payment-title")
            yield Static(id="payment-body")
            yield Static(id="payment-status")
            yield Static(
                "Tab/↑/↓ field, F2 method, Space card type, Enter confirm, Esc cancel",
                id="payment-help",
            )

    def on_mount(self) -> None:
        self._refresh_content()

    def _fields(self) -> tuple[str, ...]:
        return _FIELDS_BY_METHOD[self.method]

    def _current_field(self) -> str:
        fields = self._fields()
        return fields[self.field_index % len(fields)]

    def attempt(self) -> PaymentAttempt:
        """The payment as currently entered; never mutated by validation."""
        return PaymentAttempt(
            method=self.method,
            tip=parse_amount(self.raw["tip"]),
            amount_tendered=parse_amount(self.raw["amount_tendered"]),
            card_last4=self.raw["card_last4"],
            card_type=self.raw["card_type"],
            split_cash=parse_amount(self.raw["split_cash"]),
            split_card=parse_amount(self.raw["split_card"]),
            notes=self.raw["notes"],
        )

    def on_key(self, event: Key) -> None:
        event.stop()
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            return
        if event.key == "enter":
            self._confirm()
            return
        if event.key == "f2":
            methods = list(PaymentMethod)
            self.method = methods[(methods.index(self.method) + 1) % len(methods)]
            self.field_index = 0
        elif event.key in {"tab", "down"}:
            self.field_index = (self.field_index + 1) % len(self._fields())
        elif event.key in {"shift+tab", "up"}:
            self.field_index = (self.field_index - 1) % len(self._fields())
        elif event.key == "backspace":
            name = self._current_field()
            if name != "card_type":
                self.raw[name] = self.raw[name][:-1]
        elif event.is_printable and event.character:
            self._type(event.character)
        self._refresh_content()

    def _type(self, char: str) -> None:
        name = self._current_field()
        if name == "card_type":
            if char == " ":
                idx = CARD_TYPES.index(self.raw[name]) if self.raw[name] in CARD_TYPES else -1
                self.raw[name] = CARD_TYPES[(idx + 1) % len(CARD_TYPES)]
            return
        if name == "card_last4":
            if char.isdigit() and len(self.raw[name]) < 4:
                self.raw[name] += char
            return
        if name in _AMOUNT_FIELDS:
            if char.isdigit() or (char == "." and "." not in self.raw[name]):
                self.raw[name] += char
            return
        self.raw[name] += char

    def _confirm(self) -> None:
        details = self.validator.accept(self.attempt())
        if details is None:
            self._refresh_content()
            return
        self.dismiss(details)

    def _refresh_content(self) -> None:
        body = self.query_one("#payment-body", Static)
        status = self.query_one("#payment-status", Static)
        attempt = self.attempt()

        content = Text()
        content.append(f"Method: {self.method.value.title()}\n", style="bold")
        content.append(f"Subtotal {format_money(self.validator.subtotal)}   Tax {format_money(self.validator.tax)}\n")
        for idx, name in enumerate(self._fields()):
            pointer = "➤ " if idx == self.field_index % len(self._fields()) else "  "
            value = self.raw[name] or ("0.00" if name in _AMOUNT_FIELDS else "")
            content.append(f"{pointer}{_FIELD_LABELS[name]}: {value}\n")
        content.append(f"\nTotal due {format_money(self.validator.total_with_tip(attempt))}", style="bold")

        state = Text()
        if self.validator.validate(attempt):
            state.append("Ready to confirm", style="bold #5fbf72")
            if self.method is PaymentMethod.CASH:
                state.append(f"   Change due {format_money(self.validator.change_due(attempt))}")
        else:
            state.append("Payment incomplete", style="#ffb3b3")
            remaining = self.validator.remaining(attempt)
            if remaining > 0:
                state.append(f"   {format_money(remaining)} remaining")
        body.update(content)
        status.update(state)
