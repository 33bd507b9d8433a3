"""Per-configuration selection state for one menu item."""

from __future__ import annotations

from dataclasses import dataclass, field

from tablepos.errors import InvalidSelection
from tablepos.models import MenuItem, ModifierGroup


@dataclass
class Selection:
    """Variant, modifier and combo choices made while configuring one item.

    A Selection lives only as long as the configuration dialog; it is
    discarded once committed to a ledger or cancelled.
    """

    item: MenuItem
    variant_id: str | None = None
    modifiers: dict[str, set[str]] = field(default_factory=dict)
    combos: dict[int, list[str]] = field(default_factory=dict)
    quantity: int = 1
    notes: str = ""

    @classmethod
    def fresh(cls, item: MenuItem) -> "Selection":
        """Start a selection with the first variant, required options and combo candidates picked."""
        selection = cls(item=item)
        if item.variants:
            selection.variant_id = item.variants[0].variant_id
        for group in item.modifier_groups:
            if group.required and group.options:
                selection.modifiers[group.group_id] = {group.options[0].option_id}
            else:
                selection.modifiers[group.group_id] = set()
        if item.is_combo:
            for index, slot in enumerate(item.combo_slots):
                selection.combos[index] = list(slot.candidate_ids[:1])
        return selection

    def _group(self, group_id: str) -> ModifierGroup:
        for group in self.item.modifier_groups:
            if group.group_id == group_id:
                return group
        raise InvalidSelection(self.item.item_id, f"unknown modifier group {group_id!r}")

    def choose_variant(self, variant_id: str) -> None:
        if not any(v.variant_id == variant_id for v in self.item.variants):
            raise InvalidSelection(self.item.item_id, f"unknown variant {variant_id!r}")
        self.variant_id = variant_id

    def cycle_variant(self, delta: int = 1) -> None:
        """Move the chosen variant forward or back, wrapping around."""
        variants = self.item.variants
        if not variants:
            return
        ids = [v.variant_id for v in variants]
        idx = ids.index(self.variant_id) if self.variant_id in ids else 0
        self.variant_id = ids[(idx + delta) % len(ids)]

    def toggle_option(self, group_id: str, option_id: str) -> None:
        """Toggle an option in a multi-select group, or replace the choice in a single-select one."""
        group = self._group(group_id)
        if group.option(option_id) is None:
            raise InvalidSelection(
                self.item.item_id, f"option {option_id!r} does not belong to group {group_id!r}"
            )

        current = set(self.modifiers.get(group_id, set()))
        if group.multi_select:
            if option_id in current:
                current.remove(option_id)
            else:
                current.add(option_id)
        else:
            current = {option_id}
        self.modifiers[group_id] = current

    def selected_options(self, group_id: str) -> set[str]:
        return set(self.modifiers.get(group_id, set()))

    def toggle_combo(self, slot_index: int, candidate_id: str) -> None:
        """Toggle a combo candidate, capped at the slot's `select_count`.

        Adding past the cap leaves the selection unchanged.
        """
        if not (0 <= slot_index < len(self.item.combo_slots)):
            raise InvalidSelection(self.item.item_id, f"unknown combo slot {slot_index}")
        slot = self.item.combo_slots[slot_index]
        if candidate_id not in slot.candidate_ids:
            raise InvalidSelection(
                self.item.item_id, f"{candidate_id!r} is not a candidate for {slot.category_name!r}"
            )

        current = list(self.combos.get(slot_index, []))
        if slot.select_count == 1:
            current = [candidate_id]
        elif candidate_id in current:
            current.remove(candidate_id)
        elif len(current) < slot.select_count:
            current.append(candidate_id)
        else:
            return
        self.combos[slot_index] = current

    def set_quantity(self, quantity: int) -> None:
        self.quantity = max(1, int(quantity))

    def increment(self, delta: int = 1) -> None:
        self.set_quantity(self.quantity + delta)

    def decrement(self, delta: int = 1) -> None:
        self.set_quantity(self.quantity - delta)
