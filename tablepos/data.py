"""Static menu, floor and staff data wrapped into model instances."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable

from tablepos.catalog import Catalog
from tablepos.constant import CATEGORY_ORDER, MENU_ROWS, STAFF_ROWS, TABLE_LAYOUT
from tablepos.models import (
    ComboSlot,
    MenuItem,
    ModifierGroup,
    ModifierOption,
    OfferType,
    SpecialOffer,
    StaffMember,
    StaffRole,
    Table,
    Variant,
)


def _money(value: Any) -> Decimal:
    return Decimal(str(value))


def menu_item_from_row(row: dict[str, Any]) -> MenuItem:
    """Build a MenuItem from one raw catalog row."""
    offer_row = row.get("offer")
    offer = None
    if offer_row is not None:
        offer = SpecialOffer(
            offer_type=OfferType(offer_row["type"]),
            value=_money(offer_row["value"]),
            description=str(offer_row.get("description", "")),
        )

    return MenuItem(
        item_id=str(row["id"]),
        name=str(row["name"]),
        price=_money(row["price"]),
        category=str(row["category"]),
        available=bool(row.get("available", True)),
        description=str(row.get("description", "")),
        variants=tuple(
            Variant(variant_id=str(v["id"]), name=str(v["name"]), price=_money(v["price"]))
            for v in row.get("variants", [])
        ),
        modifier_groups=tuple(
            ModifierGroup(
                group_id=str(g["id"]),
                name=str(g["name"]),
                required=bool(g.get("required", False)),
                multi_select=bool(g.get("multi_select", False)),
                options=tuple(
                    ModifierOption(option_id=str(o["id"]), name=str(o["name"]), price=_money(o.get("price", "0")))
                    for o in g.get("options", [])
                ),
            )
            for g in row.get("modifiers", [])
        ),
        is_combo=bool(row.get("is_combo", False)),
        combo_slots=tuple(
            ComboSlot(
                category_name=str(s["category_name"]),
                select_count=int(s["select_count"]),
                candidate_ids=tuple(str(item_id) for item_id in s["items"]),
            )
            for s in row.get("combo_slots", [])
        ),
        offer=offer,
    )


def build_catalog(rows: Iterable[dict[str, Any]] = MENU_ROWS) -> Catalog:
    return Catalog((menu_item_from_row(row) for row in rows), category_order=CATEGORY_ORDER)


def build_tables(layout: dict[int, int] = TABLE_LAYOUT) -> list[Table]:
    return [Table(number=number, seats=seats) for number, seats in sorted(layout.items())]


def build_staff(rows: Iterable[dict[str, Any]] = STAFF_ROWS) -> list[StaffMember]:
    return [
        StaffMember(
            staff_id=str(row["id"]),
            name=str(row["name"]),
            email=str(row["email"]),
            role=StaffRole(row["role"]),
            active=bool(row.get("active", True)),
        )
        for row in rows
    ]


DEFAULT_CATALOG: Catalog = build_catalog()
