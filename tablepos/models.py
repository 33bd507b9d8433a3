"""Domain models for tablepos."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

ZERO = Decimal("0")


class OfferType(str, Enum):
    DISCOUNT = "discount"
    BOGO = "bogo"
    BUNDLE = "bundle"


class ItemStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PriorityTag(str, Enum):
    FIRE = "fire"
    HOLD = "hold"


class TableStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    ORDERING = "ordering"
    SERVED = "served"
    PAYING = "paying"


class ReservationStatus(str, Enum):
    CONFIRMED = "confirmed"
    SEATED = "seated"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    SPLIT = "split"


class StaffRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    WAITER = "waiter"
    KITCHEN = "kitchen"
    CASHIER = "cashier"


@dataclass(frozen=True)
class Variant:
    """A mutually exclusive size or style with its own price."""

    variant_id: str
    name: str
    price: Decimal


@dataclass(frozen=True)
class ModifierOption:
    """One choice inside a modifier group and its price delta."""

    option_id: str
    name: str
    price: Decimal = ZERO


@dataclass(frozen=True)
class ModifierGroup:
    """A named set of add-ons, single- or multi-select."""

    group_id: str
    name: str
    required: bool = False
    multi_select: bool = False
    options: tuple[ModifierOption, ...] = ()

    def option(self, option_id: str) -> ModifierOption | None:
        for option in self.options:
            if option.option_id == option_id:
                return option
        return None


@dataclass(frozen=True)
class ComboSlot:
    """A combo category filled by exactly `select_count` candidates."""

    category_name: str
    select_count: int
    candidate_ids: tuple[str, ...] = ()

    @property
    def required_count(self) -> int:
        return min(self.select_count, len(self.candidate_ids))


@dataclass(frozen=True)
class SpecialOffer:
    """A promotion attached to a menu item."""

    offer_type: OfferType
    value: Decimal
    description: str = ""


@dataclass(frozen=True)
class MenuItem:
    """A catalog entry with its optional variants, modifiers, combo slots and offer."""

    item_id: str
    name: str
    price: Decimal
    category: str
    available: bool = True
    description: str = ""
    variants: tuple[Variant, ...] = ()
    modifier_groups: tuple[ModifierGroup, ...] = ()
    is_combo: bool = False
    combo_slots: tuple[ComboSlot, ...] = ()
    offer: SpecialOffer | None = None


@dataclass(frozen=True)
class OrderLine:
    """One priced, configured menu item inside a table's order.

    Prices and labels are frozen at commit time.
    """

    line_id: str
    item_id: str
    name: str
    unit_price: Decimal
    quantity: int
    category: str = ""
    modifiers: tuple[str, ...] = ()
    notes: str = ""
    status: ItemStatus = ItemStatus.PENDING
    served_by: str | None = None
    priority: PriorityTag | None = None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class Table:
    """A dining table and its current seating."""

    number: int
    seats: int
    status: TableStatus = TableStatus.AVAILABLE
    occupied_since: datetime | None = None
    server: str | None = None
    reservation_id: str | None = None


@dataclass(frozen=True)
class Reservation:
    """A booking for a party on a given day and time."""

    reservation_id: str
    name: str
    date: date
    time: str
    party_size: int
    phone: str
    email: str | None = None
    notes: str | None = None
    table_id: int | None = None
    status: ReservationStatus = ReservationStatus.CONFIRMED


@dataclass
class PaymentAttempt:
    """Fields entered in the payment dialog; kept intact across failed validations."""

    method: PaymentMethod
    tip: Decimal = ZERO
    amount_tendered: Decimal = ZERO
    card_last4: str = ""
    card_type: str = "Visa"
    split_cash: Decimal = ZERO
    split_card: Decimal = ZERO
    notes: str = ""


@dataclass(frozen=True)
class PaymentDetails:
    """An accepted payment and the totals it settled."""

    method: PaymentMethod
    subtotal: Decimal
    tax: Decimal
    tip: Decimal
    total: Decimal
    paid_at: datetime
    amount_tendered: Decimal | None = None
    change_due: Decimal | None = None
    card_last4: str | None = None
    card_type: str | None = None
    split_cash: Decimal | None = None
    split_card: Decimal | None = None
    notes: str = ""
    lines: tuple[OrderLine, ...] = field(default=(), repr=False)


@dataclass(frozen=True)
class StaffMember:
    """A member of staff and their role."""

    staff_id: str
    name: str
    email: str
    role: StaffRole
    active: bool = True
