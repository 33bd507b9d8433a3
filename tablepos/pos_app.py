"""Main Textual app class."""

from __future__ import annotations

import logging
from datetime import date

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.widgets import Header, Static

from tablepos import kitchen
from tablepos.catalog import Catalog
from tablepos.config import DEFAULT_SERVER
from tablepos.data import DEFAULT_CATALOG, build_staff, build_tables
from tablepos.errors import InvalidSelection
from tablepos.item_modal import ItemModal
from tablepos.ledger import OrderLedger
from tablepos.models import MenuItem, OrderLine, PaymentDetails, TableStatus
from tablepos.payment import PaymentValidator
from tablepos.payment_modal import PaymentModal
from tablepos.pricing import format_money
from tablepos.printer import check_printer_dependencies, print_receipt
from tablepos.reporting import build_report
from tablepos.rendering import format_kitchen_ticket, format_line_label, format_modifier_tags, format_table_label
from tablepos.reservations import ReservationBook
from tablepos.selection import Selection
from tablepos.sessions import TableSessions
from tablepos.staff import StaffRoster
from tablepos.tables import FloorPlan

logger = logging.getLogger(__name__)


class PosApp(App):
    """A Textual point-of-sale for table orders, kitchen progress and payment."""

    TITLE = "Table POS"
    SUB_TITLE = "Orders / Kitchen / Payment"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #tables-pane {
        width: 2fr;
        border: round $accent;
        padding: 0 1;
    }

    #orders-pane {
        width: 3fr;
        border: round $primary;
        padding: 0 1;
    }

    #search-pane {
        width: 2fr;
        border: round $secondary;
        padding: 0 1;
    }

    #search-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 4;
    }

    #results, #orders-list, #tables-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #order-totals {
        height: 4;
        padding: 0 1;
    }

    .pane-title {
        text-style: bold;
    }
    """

    input_state = reactive("normal")
    category_index = reactive(-1)
    query = reactive("")
    selected_index = reactive(0)
    table_index = reactive(0)
    order_selected_index = reactive(None)
    kitchen_view = reactive(False)

    BINDINGS = [
        ("tab", "cycle_results(1)", "Next result"),
        ("up", "cycle_results(-1)", "Previous result"),
        ("down", "cycle_results(1)", "Next result"),
        ("enter", "configure_selected", "Configure item"),
        ("backspace", "backspace_query", "Delete query char"),
        Binding("ctrl+s", "submit_order", "Send to kitchen", priority=True),
        Binding("ctrl+p", "open_payment", "Payment", priority=True),
        ("ctrl+c", "cancel_active_mode", "Exit search"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        catalog: Catalog = DEFAULT_CATALOG,
        floor: FloorPlan | None = None,
        reservations: ReservationBook | None = None,
        staff: StaffRoster | None = None,
        server: str | None = None,
    ) -> None:
        super().__init__()
        self.catalog = catalog
        self.floor = floor if floor is not None else FloorPlan(build_tables())
        self.reservations = reservations if reservations is not None else ReservationBook()
        self.staff = staff if staff is not None else StaffRoster(build_staff())
        servers = self.staff.servers()
        self.server = server or (servers[0].name if servers else DEFAULT_SERVER)
        self.sessions = TableSessions(self.floor, server=self.server)
        self.payments: list[PaymentDetails] = []
        self.system_status = ""
        self.printer_ready = False

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="tables-pane"):
                yield Static("Tables", classes="pane-title")
                yield Static(id="tables-list")
            with Vertical(id="orders-pane"):
                yield Static(id="orders-title", classes="pane-title")
                yield Static("(no items yet)", id="orders-list")
                yield Static(id="order-totals")
            with Vertical(id="search-pane"):
                yield Static(id="search-bar")
                yield Static(id="results")

    def on_mount(self) -> None:
        self.printer_ready, msg = check_printer_dependencies()
        self.system_status = msg
        logger.info("app mounted printer_status=%r", msg)
        self._refresh_all()

    # -- state helpers -------------------------------------------------

    def _active_table_number(self) -> int:
        return self.floor.tables()[self.table_index].number

    def _ledger(self) -> OrderLedger:
        return self.sessions.ledger(self._active_table_number())

    def _category(self) -> str | None:
        categories = self.catalog.categories()
        if self.category_index < 0 or not categories:
            return None
        return categories[self.category_index % len(categories)]

    def _kitchen_rows(self) -> list[tuple[OrderLedger, OrderLine]]:
        return kitchen.kitchen_queue(self.sessions.open_ledgers())

    def _selected_target(self) -> tuple[OrderLedger, str] | None:
        """Ledger and line id under the cursor, in whichever view is shown."""
        if self.kitchen_view:
            rows = self._kitchen_rows()
            if self.order_selected_index is None or not (0 <= self.order_selected_index < len(rows)):
                return None
            ledger, line = rows[self.order_selected_index]
            return (ledger, line.line_id)
        ledger = self._ledger()
        lines = ledger.lines
        if self.order_selected_index is None or not (0 <= self.order_selected_index < len(lines)):
            return None
        return (ledger, lines[self.order_selected_index].line_id)

    def _set_status(self, message: str) -> None:
        self.system_status = message
        self._refresh_search_bar()

    # -- keys ----------------------------------------------------------

    def on_key(self, event: Key) -> None:
        if isinstance(self.screen, (ItemModal, PaymentModal)):
            return
        if not event.is_printable or not event.character or len(event.character) != 1:
            return

        char = event.character
        if self.input_state == "search":
            self.query += char
            self.selected_index = 0
            self._refresh_search()
            event.stop()
            return

        handlers = {
            "[": lambda: self._move_table(-1),
            "]": lambda: self._move_table(1),
            "j": lambda: self._move_order_selection(1),
            "k": lambda: self._move_order_selection(-1),
            "/": self._start_search,
            "c": self._cycle_category,
            "d": self._delete_selected_line,
            "a": self._advance_selected_line,
            "x": self._cancel_selected_line,
            "h": self._toggle_selected_priority,
            "o": self._seat_active_table,
            "v": self._mark_served,
            "r": self._release_active_table,
            "t": self._toggle_kitchen_view,
        }
        handler = handlers.get(char.lower() if char.isalpha() else char)
        if handler is None:
            return
        handler()
        event.stop()

    def _start_search(self) -> None:
        self.input_state = "search"
        self.query = ""
        self.selected_index = 0
        self._refresh_search()

    def _cycle_category(self) -> None:
        count = len(self.catalog.categories())
        # -1 means every category.
        self.category_index = ((self.category_index + 2) % (count + 1)) - 1
        self.selected_index = 0
        self._refresh_search()

    def action_cancel_active_mode(self) -> None:
        if self.input_state == "normal":
            return
        self.input_state = "normal"
        self.query = ""
        self.selected_index = 0
        self._refresh_search()

    def action_cycle_results(self, delta: int) -> None:
        if self.input_state != "search":
            return
        results = self._filtered_results()
        if not results:
            self.selected_index = 0
            self._refresh_results(results)
            return
        self.selected_index = (self.selected_index + delta) % len(results)
        self._refresh_results(results)

    def action_backspace_query(self) -> None:
        if self.input_state != "search" or not self.query:
            return
        self.query = self.query[:-1]
        self.selected_index = 0
        self._refresh_search()

    def action_configure_selected(self) -> None:
        if self.input_state != "search":
            return
        results = self._filtered_results()
        if not results:
            return
        item = results[self.selected_index]
        if not item.available:
            self._set_status(f"{item.name} is not available")
            return
        self.push_screen(ItemModal(item, self.catalog), lambda selection: self._commit_selection(item, selection))

    def _commit_selection(self, item: MenuItem, selection: Selection | None) -> None:
        if selection is None:
            return
        number = self._active_table_number()
        table = self.floor.get(number)
        if table is not None and table.status is TableStatus.AVAILABLE:
            self.floor.seat(number, server=self.server)
        try:
            line = self._ledger().commit(item, selection, self.catalog)
        except InvalidSelection as exc:
            self._set_status(exc.message)
            return
        self.order_selected_index = len(self._ledger().lines) - 1
        self._set_status(f"Added {line.quantity}x {line.name}")
        self._refresh_all()

    def action_submit_order(self) -> None:
        if isinstance(self.screen, (ItemModal, PaymentModal)):
            return
        number = self._active_table_number()
        sent = self._ledger().submit()
        if not sent:
            self._set_status("Nothing new to send")
            return
        table = self.floor.get(number)
        if table is not None and table.status in {TableStatus.OCCUPIED, TableStatus.SERVED, TableStatus.PAYING}:
            self.floor.start_ordering(number)
        self._set_status(f"Sent {len(sent)} line(s) to kitchen")
        self._refresh_all()

    def action_open_payment(self) -> None:
        if isinstance(self.screen, (ItemModal, PaymentModal)):
            return
        ledger = self._ledger()
        if not ledger.billable_lines():
            self._set_status("Nothing to pay")
            return
        self.floor.request_payment(self._active_table_number())
        self._refresh_tables()
        self.push_screen(PaymentModal(PaymentValidator.for_ledger(ledger)), self._finish_payment)

    def _finish_payment(self, details: PaymentDetails | None) -> None:
        if details is None:
            self._set_status("Payment cancelled")
            return
        number = self._active_table_number()
        self.payments.append(details)
        message = f"Paid {format_money(details.total)} by {details.method.value}"
        if details.change_due:
            message += f", change {format_money(details.change_due)}"
        if self.printer_ready:
            try:
                print_receipt(details, number)
            except Exception as exc:
                logger.exception("receipt print failed table=%s", number)
                message += f" (print failed: {exc})"
        self.sessions.release(number)
        self.order_selected_index = None
        self._set_status(message)
        self._refresh_all()

    # -- order line actions -----------------------------------------------

    def _delete_selected_line(self) -> None:
        target = self._selected_target()
        if target is None:
            return
        ledger, line_id = target
        if not ledger.remove_line(line_id):
            self._set_status("Line already sent; cancel it instead")
            return
        lines = ledger.lines
        self.order_selected_index = min(self.order_selected_index or 0, len(lines) - 1) if lines else None
        self._refresh_orders()

    def _advance_selected_line(self) -> None:
        target = self._selected_target()
        if target is None:
            return
        ledger, line_id = target
        if not ledger.is_submitted(line_id):
            self._set_status("Send the order to the kitchen first")
            return
        kitchen.advance(ledger, line_id, served_by=self.server)
        self._refresh_orders()

    def _cancel_selected_line(self) -> None:
        target = self._selected_target()
        if target is None:
            return
        kitchen.cancel(*target)
        self._refresh_orders()

    def _toggle_selected_priority(self) -> None:
        target = self._selected_target()
        if target is None:
            return
        kitchen.toggle_priority(*target)
        self._refresh_orders()

    def _toggle_kitchen_view(self) -> None:
        self.kitchen_view = not self.kitchen_view
        self.order_selected_index = None
        self._refresh_orders()

    # -- table actions ---------------------------------------------------

    def _seat_active_table(self) -> None:
        self.floor.seat(self._active_table_number(), server=self.server)
        self._refresh_tables()

    def _mark_served(self) -> None:
        self.floor.mark_served(self._active_table_number())
        self._refresh_tables()

    def _release_active_table(self) -> None:
        if self._ledger().billable_lines():
            self._set_status("Settle the check before releasing the table")
            return
        self.sessions.release(self._active_table_number())
        self.order_selected_index = None
        self._refresh_all()

    def _move_table(self, delta: int) -> None:
        self.table_index = (self.table_index + delta) % len(self.floor.tables())
        self.order_selected_index = None
        self._refresh_all()

    def _move_order_selection(self, delta: int) -> None:
        count = len(self._kitchen_rows()) if self.kitchen_view else len(self._ledger().lines)
        if not count:
            return
        if self.order_selected_index is None:
            self.order_selected_index = 0 if delta > 0 else count - 1
        else:
            self.order_selected_index = (self.order_selected_index + delta) % count
        self._refresh_orders()

    # -- rendering ---------------------------------------------------------

    def _filtered_results(self) -> list[MenuItem]:
        return self.catalog.search(self.query, self._category())

    def _refresh_all(self) -> None:
        self._refresh_tables()
        self._refresh_orders()
        self._refresh_search()

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)

        rows = max(1, rows)
        if total <= rows:
            return (0, total)

        if selected is None:
            start = 0
        else:
            start = max(0, selected - rows // 2)
            start = min(start, total - rows)
        return (start, start + rows)

    def _refresh_tables(self) -> None:
        try:
            widget = self.query_one("#tables-list", Static)
        except NoMatches:
            return
        lines = Text()
        for idx, table in enumerate(self.floor.tables()):
            if idx > 0:
                lines.append("\n")
            lines.append("➤ " if idx == self.table_index else "  ")
            lines.append_text(format_table_label(table))
        todays = self.reservations.upcoming(date.today())
        if todays:
            lines.append(f"\n\n{len(todays)} reservation(s) today", style="dim")
        today = date.today()
        report = build_report(self.payments, start=today, end=today)
        if report.order_count:
            lines.append(
                f"\n{report.order_count} paid today, {format_money(report.gross_collected)}",
                style="dim",
            )
        widget.update(lines)

    def _refresh_orders(self) -> None:
        try:
            orders_widget = self.query_one("#orders-list", Static)
            title = self.query_one("#orders-title", Static)
            totals = self.query_one("#order-totals", Static)
        except NoMatches:
            return

        if self.kitchen_view:
            self._refresh_kitchen(orders_widget, title, totals)
            return

        ledger = self._ledger()
        title.update(f"Table {ledger.table_number} order")
        totals.update(
            f"Subtotal {format_money(ledger.subtotal())}   Tax {format_money(ledger.tax())}\n"
            f"Total {format_money(ledger.total())}   Items {ledger.item_count()}"
        )
        lines_in_order = ledger.lines
        if not lines_in_order:
            self.order_selected_index = None
            orders_widget.update("(no items yet)")
            return

        if self.order_selected_index is not None and self.order_selected_index >= len(lines_in_order):
            self.order_selected_index = len(lines_in_order) - 1

        visible_rows = self._visible_rows(orders_widget)
        start, end = self._window_bounds(len(lines_in_order), visible_rows, self.order_selected_index)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")
        for idx in range(start, end):
            line = lines_in_order[idx]
            if idx > start:
                lines.append("\n")
            lines.append("➤ " if idx == self.order_selected_index else "  ")
            lines.append(f"{idx + 1}. ")
            lines.append_text(format_line_label(line, submitted=ledger.is_submitted(line.line_id)))
            if line.modifiers:
                lines.append("\n      ")
                lines.append_text(format_modifier_tags(line.modifiers))
            if line.notes:
                lines.append(f"\n      \"{line.notes}\"", style="italic")
        if end < len(lines_in_order):
            lines.append("\n⋮", style="dim")
        orders_widget.update(lines)

    def _refresh_kitchen(self, orders_widget: Static, title: Static, totals: Static) -> None:
        rows = self._kitchen_rows()
        title.update("Kitchen queue")
        fired = sum(1 for _, line in rows if line.priority is not None)
        totals.update(f"{len(rows)} active line(s), {fired} tagged\nA advance, X cancel, H fire/hold, T back")
        if not rows:
            self.order_selected_index = None
            orders_widget.update("(kitchen is clear)")
            return
        if self.order_selected_index is not None and self.order_selected_index >= len(rows):
            self.order_selected_index = len(rows) - 1

        start, end = self._window_bounds(len(rows), self._visible_rows(orders_widget), self.order_selected_index)
        text = Text()
        for idx in range(start, end):
            ledger, line = rows[idx]
            if idx > start:
                text.append("\n")
            text.append("➤ " if idx == self.order_selected_index else "  ")
            text.append_text(format_kitchen_ticket(ledger.table_number, line))
        orders_widget.update(text)

    def _refresh_search(self) -> None:
        self._refresh_search_bar()
        if self.input_state == "normal":
            self._refresh_results([])
            return
        self._refresh_results(self._filtered_results())

    def _refresh_search_bar(self) -> None:
        try:
            bar = self.query_one("#search-bar", Static)
        except NoMatches:
            return
        category = self._category() or "all"
        if self.input_state == "normal":
            status = self.system_status or "Ready"
            bar.update(f"/ search [{category}], C category, [ ] table\nCtrl+S send, T kitchen view, Ctrl+P pay\n{status}")
            return
        text = Text()
        text.append(f" {category.upper()} ", style="bold #ffffff on #2f6db5")
        text.append(f": {self.query}")
        bar.update(text)

    def _refresh_results(self, results: list[MenuItem]) -> None:
        try:
            results_widget = self.query_one("#results", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            results_widget.update("")
            return
        if not results:
            results_widget.update("No results")
            return
        if self.selected_index >= len(results):
            self.selected_index = 0

        visible_rows = self._visible_rows(results_widget)
        start, end = self._window_bounds(len(results), visible_rows, self.selected_index)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")
        for idx in range(start, end):
            item = results[idx]
            if idx > start:
                lines.append("\n")
            pointer = "➤ " if idx == self.selected_index else "  "
            style = "dim strike" if not item.available else ""
            lines.append(f"{pointer}{item.name}  {format_money(item.price)}", style=style)
        if end < len(results):
            lines.append("\n⋮", style="dim")
        results_widget.update(lines)
