"""Item configuration modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from tablepos.catalog import Catalog
from tablepos.errors import InvalidSelection
from tablepos.models import MenuItem
from tablepos.pricing import check_commit, format_money, option_label, price_selection
from tablepos.selection import Selection


class ItemModal(ModalScreen[Selection | None]):
    """Centered modal to pick variant, modifiers, combo items, quantity and notes for one item."""

    BINDINGS = [
        ("escape", "close", "Cancel"),
        ("ctrl+c", "close", "Cancel"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("enter", "toggle_current", "Toggle"),
        ("ctrl+s", "commit", "Add to order"),
    ]

    CSS = """
    ItemModal {
        align: center middle;
        background: $background 60%;
    }

    #item-dialog {
        width: 72;
        height: auto;
        max-height: 90%;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #item-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #item-body {
        margin-bottom: 1;
        color: white;
    }

    #item-error {
        color: #ffb3b3;
    }

    #item-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    cursor_index = reactive(0)
    _VARIANT_KIND = "variant"
    _OPTION_KIND = "option"
    _COMBO_KIND = "combo"
    _NOTES_KIND = "notes"

    def __init__(self, item: MenuItem, catalog: Catalog) -> None:
        super().__init__()
        self.item = item
        self.catalog = catalog
        self.selection = Selection.fresh(item)
        self.typing_notes = False
        self.notes_input_value = ""
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="item-dialog"):
            yield Static(self.item.name, id="item-title")
            yield Static(id="item-body")
            yield Static(id="item-error")
            yield Static(id="item-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if self.typing_notes:
            self._handle_notes_key(event)
            return

        if event.character in {"+", "="}:
            self.selection.increment()
            self._refresh_content()
            event.stop()
        elif event.character in {"-", "_"}:
            self.selection.decrement()
            self._refresh_content()
            event.stop()

    def _handle_notes_key(self, event: Key) -> None:
        if event.key == "escape":
            self.typing_notes = False
            self.notes_input_value = ""
        elif event.key == "enter":
            self.selection.notes = self.notes_input_value.strip()
            self.typing_notes = False
            self.notes_input_value = ""
        elif event.key == "backspace":
            self.notes_input_value = self.notes_input_value[:-1]
        elif event.is_printable and event.character:
            self.notes_input_value += event.character
        # Every key belongs to the notes field while typing.
        event.stop()
        self._refresh_content()

    def action_close(self) -> None:
        if self.typing_notes:
            self.typing_notes = False
            self.notes_input_value = ""
            self._refresh_content()
            return
        self.dismiss(None)

    def action_move_cursor(self, delta: int) -> None:
        if self.typing_notes:
            return
        rows = self._rows()
        self.cursor_index = (self.cursor_index + delta) % len(rows)
        self._refresh_content()

    def action_toggle_current(self) -> None:
        if self.typing_notes:
            return
        kind, key, value = self._rows()[self.cursor_index]
        self.error = ""
        try:
            if kind == self._VARIANT_KIND:
                self.selection.choose_variant(value)
            elif kind == self._OPTION_KIND:
                self.selection.toggle_option(key, value)
            elif kind == self._COMBO_KIND:
                self.selection.toggle_combo(int(key), value)
            else:
                self.typing_notes = True
                self.notes_input_value = self.selection.notes
        except InvalidSelection as exc:
            self.error = exc.message
        self._refresh_content()

    def action_commit(self) -> None:
        if self.typing_notes:
            return
        try:
            check_commit(self.item, self.selection)
        except InvalidSelection as exc:
            self.error = exc.message
            self._refresh_content()
            return
        self.dismiss(self.selection)

    def _rows(self) -> list[tuple[str, str, str]]:
        rows: list[tuple[str, str, str]] = []
        rows.extend((self._VARIANT_KIND, "", v.variant_id) for v in self.item.variants)
        for group in self.item.modifier_groups:
            rows.extend((self._OPTION_KIND, group.group_id, o.option_id) for o in group.options)
        for index, slot in enumerate(self.item.combo_slots):
            rows.extend((self._COMBO_KIND, str(index), cid) for cid in slot.candidate_ids)
        rows.append((self._NOTES_KIND, "", ""))
        return rows

    def _row_text(self, kind: str, key: str, value: str) -> tuple[str, bool]:
        if kind == self._VARIANT_KIND:
            variant = self.catalog.find_variant(self.item, value)
            checked = self.selection.variant_id == value
            return (f"({'*' if checked else ' '}) {variant.name}  {format_money(variant.price)}", checked)
        if kind == self._OPTION_KIND:
            option = self.catalog.find_option(self.item, key, value)
            checked = value in self.selection.selected_options(key)
            return (f"[{'x' if checked else ' '}] {option_label(option.name, option.price)}", checked)
        if kind == self._COMBO_KIND:
            candidate = self.catalog.find_item(value)
            checked = value in self.selection.combos.get(int(key), [])
            return (f"[{'x' if checked else ' '}] {candidate.name if candidate else value}", checked)
        if self.typing_notes:
            return (f"Notes: {self.notes_input_value}|", True)
        return (f"Notes: {self.selection.notes or '(none)'}", bool(self.selection.notes))

    def _section_header(self, kind: str, key: str) -> str:
        if kind == self._VARIANT_KIND:
            return "Size"
        if kind == self._OPTION_KIND:
            group = self.catalog.find_group(self.item, key)
            suffix = " (required)" if group.required else ""
            suffix += " (pick any)" if group.multi_select else ""
            return f"{group.name}{suffix}"
        if kind == self._COMBO_KIND:
            slot = self.item.combo_slots[int(key)]
            return f"{slot.category_name} (choose {slot.select_count})"
        return ""

    def _refresh_content(self) -> None:
        body = self.query_one("#item-body", Static)
        error_widget = self.query_one("#item-error", Static)
        help_text = self.query_one("#item-help", Static)

        content = Text(style="white")
        if self.item.description:
            content.append(f"{self.item.description}\n", style="dim")
        if self.item.offer is not None:
            content.append(f"Offer: {self.item.offer.description or self.item.offer.offer_type.value}\n", style="bold")

        rows = self._rows()
        if self.cursor_index >= len(rows):
            self.cursor_index = len(rows) - 1

        last_section: tuple[str, str] | None = None
        for idx, (kind, key, value) in enumerate(rows):
            section = (kind, key if kind != self._VARIANT_KIND else "")
            if section != last_section:
                header = self._section_header(kind, key)
                content.append(f"\n{header}\n" if header else "\n", style="bold")
                last_section = section
            pointer = "➤ " if idx == self.cursor_index else "  "
            label, checked = self._row_text(kind, key, value)
            content.append(f"{pointer}{label}\n", style="bold white" if checked else "white")

        content.append(f"\nQuantity: {self.selection.quantity}   ")
        try:
            priced = price_selection(self.item, self.selection, self.catalog)
            content.append(f"Unit {format_money(priced.unit_price)}   ")
            content.append(f"Total {format_money(priced.line_total)}", style="bold")
        except InvalidSelection as exc:
            content.append(exc.message, style="#ffb3b3")

        if self.typing_notes:
            help_text.update("Type notes, Enter confirm, Esc cancel typing")
        else:
            help_text.update("J/K/↑/↓ move, Enter toggle, +/- quantity, Ctrl+S add, Esc cancel")
        error_widget.update(self.error)
        body.update(content)
