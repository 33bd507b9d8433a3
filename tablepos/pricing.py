"""Line pricing for configured menu items."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from tablepos.catalog import Catalog
from tablepos.config import CURRENCY_SYMBOL
from tablepos.errors import InvalidSelection
from tablepos.models import ZERO, MenuItem, OfferType
from tablepos.selection import Selection

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class PricedLine:
    """Result of pricing one selection."""

    base_price: Decimal
    modifier_total: Decimal
    unit_price: Decimal
    quantity: int
    labels: tuple[str, ...]

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def discount(self) -> Decimal:
        return self.base_price + self.modifier_total - self.unit_price


def round_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount: Decimal) -> str:
    """Format an amount as currency, e.g. `$17.09`."""
    value = round_cents(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(value):,.2f}"


def check_selection(item: MenuItem, selection: Selection) -> None:
    """Raise InvalidSelection unless every choice belongs to `item` and required groups are filled."""
    if selection.item.item_id != item.item_id:
        raise InvalidSelection(item.item_id, f"selection was made for {selection.item.item_id!r}")

    if selection.variant_id is not None and not any(v.variant_id == selection.variant_id for v in item.variants):
        raise InvalidSelection(item.item_id, f"unknown variant {selection.variant_id!r}")

    groups = {group.group_id: group for group in item.modifier_groups}
    for group_id, option_ids in selection.modifiers.items():
        group = groups.get(group_id)
        if group is None:
            raise InvalidSelection(item.item_id, f"unknown modifier group {group_id!r}")
        for option_id in option_ids:
            if group.option(option_id) is None:
                raise InvalidSelection(
                    item.item_id, f"option {option_id!r} does not belong to group {group_id!r}"
                )
        if not group.multi_select and len(option_ids) > 1:
            raise InvalidSelection(item.item_id, f"{group.name} allows a single choice")

    for group in item.modifier_groups:
        if group.required and not selection.modifiers.get(group.group_id):
            raise InvalidSelection(item.item_id, f"{group.name} is required")

    for slot_index, candidate_ids in selection.combos.items():
        if not (0 <= slot_index < len(item.combo_slots)):
            raise InvalidSelection(item.item_id, f"unknown combo slot {slot_index}")
        slot = item.combo_slots[slot_index]
        foreign = [cid for cid in candidate_ids if cid not in slot.candidate_ids]
        if foreign:
            raise InvalidSelection(item.item_id, f"{foreign[0]!r} is not a candidate for {slot.category_name!r}")


def check_commit(item: MenuItem, selection: Selection) -> None:
    """Everything `check_selection` checks, plus availability and filled combo slots."""
    if not item.available:
        raise InvalidSelection(item.item_id, f"{item.name} is not available")
    check_selection(item, selection)
    for slot_index, slot in enumerate(item.combo_slots):
        chosen = selection.combos.get(slot_index, [])
        if len(chosen) != slot.required_count:
            raise InvalidSelection(
                item.item_id, f"choose {slot.required_count} for {slot.category_name} ({len(chosen)} chosen)"
            )


def base_price(item: MenuItem, selection: Selection) -> Decimal:
    if selection.variant_id is not None:
        for variant in item.variants:
            if variant.variant_id == selection.variant_id:
                return variant.price
    return item.price


def apply_offer(item: MenuItem, price: Decimal) -> Decimal:
    """Apply a discount offer. Bogo and bundle offers are display-only."""
    offer = item.offer
    if offer is None or offer.offer_type is not OfferType.DISCOUNT:
        return price
    return price * (1 - offer.value / HUNDRED)


def option_label(name: str, price: Decimal) -> str:
    if price > 0:
        return f"{name} (+{format_money(price)})"
    return name


def resolved_labels(item: MenuItem, selection: Selection, catalog: Catalog | None = None) -> tuple[str, ...]:
    """Human-readable modifier and combo labels, in catalog order."""
    labels: list[str] = []
    for group in item.modifier_groups:
        chosen = selection.modifiers.get(group.group_id, set())
        for option in group.options:
            if option.option_id in chosen:
                labels.append(option_label(option.name, option.price))

    for slot_index, slot in enumerate(item.combo_slots):
        for candidate_id in selection.combos.get(slot_index, []):
            candidate = catalog.find_item(candidate_id) if catalog is not None else None
            labels.append(f"{slot.category_name}: {candidate.name if candidate else candidate_id}")
    return tuple(labels)


def price_selection(item: MenuItem, selection: Selection, catalog: Catalog | None = None) -> PricedLine:
    """Price a selection: variant or base price, plus modifiers, minus any discount offer."""
    check_selection(item, selection)

    base = base_price(item, selection)
    modifier_total = ZERO
    for group in item.modifier_groups:
        chosen = selection.modifiers.get(group.group_id, set())
        for option in group.options:
            if option.option_id in chosen:
                modifier_total += option.price

    unit_price = apply_offer(item, base + modifier_total)
    quantity = max(1, selection.quantity)
    priced = PricedLine(
        base_price=base,
        modifier_total=modifier_total,
        unit_price=unit_price,
        quantity=quantity,
        labels=resolved_labels(item, selection, catalog),
    )
    logger.debug("priced %s unit=%s qty=%d", item.item_id, unit_price, quantity)
    return priced
