"""Rich text helpers for lines, statuses and tables."""

from __future__ import annotations

from rich.text import Text

from tablepos.models import ItemStatus, OrderLine, PriorityTag, Table, TableStatus
from tablepos.pricing import format_money
from tablepos.tables import occupied_label

_ITEM_STATUS_STYLES: dict[ItemStatus, str] = {
    ItemStatus.PENDING: "bold #0b1f0f on #e0c95f",
    ItemStatus.PREPARING: "bold #ffffff on #2f6db5",
    ItemStatus.READY: "bold #0b1f0f on #5fbf72",
    ItemStatus.DELIVERED: "#dddddd on #444444",
    ItemStatus.CANCELLED: "bold #ffffff on #b23a48",
}

_TABLE_STATUS_STYLES: dict[TableStatus, str] = {
    TableStatus.AVAILABLE: "bold #0b1f0f on #5fbf72",
    TableStatus.OCCUPIED: "bold #ffffff on #2f6db5",
    TableStatus.ORDERING: "bold #0b1f0f on #e0c95f",
    TableStatus.SERVED: "bold #ffffff on #7b4fb5",
    TableStatus.PAYING: "bold #ffffff on #b23a48",
}


def status_badge(status: ItemStatus) -> Text:
    return Text(f" {status.value.upper()} ", style=_ITEM_STATUS_STYLES[status])


def table_badge(status: TableStatus) -> Text:
    return Text(f" {status.value.title()} ", style=_TABLE_STATUS_STYLES[status])


def priority_badge(tag: PriorityTag | None) -> Text:
    if tag is PriorityTag.FIRE:
        return Text(" FIRE ", style="bold #5a3200 on #f2c14e")
    if tag is PriorityTag.HOLD:
        return Text(" HOLD ", style="bold #0b2a4a on #9cc4f0")
    return Text()


def format_line_label(line: OrderLine, submitted: bool = False) -> Text:
    """Render `2x Name  $25.98` with status and priority badges."""
    text = Text()
    style = "dim strike" if line.status is ItemStatus.CANCELLED else ""
    text.append(f"{line.quantity}x {line.name}", style=style)
    text.append(f"  {format_money(line.line_total)}", style="bold" if not style else style)
    if submitted:
        text.append(" ")
        text.append_text(status_badge(line.status))
    if line.priority is not None:
        text.append(" ")
        text.append_text(priority_badge(line.priority))
    if line.served_by and line.status is ItemStatus.DELIVERED:
        text.append(f" by {line.served_by}", style="dim")
    return text


def format_modifier_tags(labels: tuple[str, ...] | list[str]) -> Text:
    """Render modifier labels as compact tags."""
    text = Text()
    for idx, label in enumerate(labels):
        if idx > 0:
            text.append(" ")
        text.append(f"[{label}]", style="white")
    return text


def format_table_label(table: Table) -> Text:
    text = Text()
    text.append(f"T{table.number:<2} ", style="bold")
    text.append(f"{table.seats} seats ")
    text.append_text(table_badge(table.status))
    elapsed = occupied_label(table)
    if elapsed:
        text.append(f" {elapsed}", style="dim")
    if table.server:
        text.append(f" {table.server}", style="italic")
    return text


def format_kitchen_ticket(table_number: int | None, line: OrderLine) -> Text:
    """Render one kitchen-queue row: priority tag first, then table, item and status."""
    text = Text()
    if line.priority is not None:
        text.append_text(priority_badge(line.priority))
        text.append(" ")
    text.append(f"T{table_number} " if table_number is not None else "-- ", style="bold")
    text.append(f"{line.quantity}x {line.name} ")
    text.append_text(status_badge(line.status))
    if line.modifiers:
        text.append("\n      ")
        text.append_text(format_modifier_tags(line.modifiers))
    if line.notes:
        text.append(f'\n      "{line.notes}"', style="italic")
    return text
