"""Read-only menu catalog lookups."""

from __future__ import annotations

from typing import Iterable

from tablepos.models import MenuItem, ModifierGroup, ModifierOption, Variant


class Catalog:
    """Immutable view over a list of menu items, keyed by item id."""

    def __init__(self, items: Iterable[MenuItem], category_order: Iterable[str] = ()) -> None:
        self._items: tuple[MenuItem, ...] = tuple(items)
        self._by_id: dict[str, MenuItem] = {item.item_id: item for item in self._items}
        self._category_order = list(category_order)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def find_item(self, item_id: str) -> MenuItem | None:
        return self._by_id.get(item_id)

    def find_variant(self, item: MenuItem, variant_id: str) -> Variant | None:
        for variant in item.variants:
            if variant.variant_id == variant_id:
                return variant
        return None

    def find_group(self, item: MenuItem, group_id: str) -> ModifierGroup | None:
        for group in item.modifier_groups:
            if group.group_id == group_id:
                return group
        return None

    def find_option(self, item: MenuItem, group_id: str, option_id: str) -> ModifierOption | None:
        group = self.find_group(item, group_id)
        if group is None:
            return None
        return group.option(option_id)

    def find_combo_candidate(self, item: MenuItem, slot_index: int, candidate_id: str) -> MenuItem | None:
        """Return the catalog item for a combo candidate, if the slot offers it."""
        if not (0 <= slot_index < len(item.combo_slots)):
            return None
        if candidate_id not in item.combo_slots[slot_index].candidate_ids:
            return None
        return self._by_id.get(candidate_id)

    def categories(self) -> list[str]:
        present = {item.category for item in self._items}
        ordered = [name for name in self._category_order if name in present]
        ordered.extend(sorted(present - set(ordered)))
        return ordered

    def items_in_category(self, category: str) -> list[MenuItem]:
        return [item for item in self._items if item.category == category]

    def search(self, query: str, category: str | None = None) -> list[MenuItem]:
        """Case-insensitive substring match on item names, optionally within one category."""
        source = self.items_in_category(category) if category else list(self._items)
        q = query.strip().lower()
        if not q:
            return source
        return [item for item in source if q in item.name.lower()]
