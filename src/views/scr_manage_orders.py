from typing import Optional

from rich.text import Text
from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, DataTable, Label

from controllers.orders import OrdersController
from gateway.models import STATUS_COLORS, Order
from utils.pure import format_money, format_timestamp, short_id
from utils.router import order_path
from views.base_screen import BaseScreen
from views.modal_dialog import StatusPickerModal


def status_text(status: str) -> Text:
    color = STATUS_COLORS.get(status, "grey50")
    return Text(status.capitalize(), style=f"bold {color}")


class ManageOrdersScreen(BaseScreen):
    """
    All orders, newest first. The status of any order can be set to any
    other status; a row being written ignores further changes until done.
    """

    path = "/manage-orders"

    BINDINGS = [
        Binding("s", "change_status", "Change Status", show=True),
        Binding("v", "view", "View Details", show=True),
        Binding("r", "reload", "Refresh", show=True),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.controller = OrdersController(self.app.state.gateway)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-orders"):
            yield Label("Manage Orders", classes="screen-title")
            yield Label("", id="label-orders-error", classes="error-box hidden")
            yield DataTable(id="table-orders")
            yield Label("No orders found", id="label-empty", classes="hidden")
            with Horizontal(id="hort-table-control"):
                yield Button("Refresh", id="btn-refresh")
                yield Button("Change Status", id="btn-status", variant="warning")
                yield Button("View Details", id="btn-view", variant="primary")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Order", "Customer", "Email", "Phone", "Total", "Status", "Date")
        self.handle_reload()

    def on_unmount(self) -> None:
        self.controller.close()

    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True, group="load", exit_on_error=False)
    async def handle_reload(self) -> None:
        self.query_one(DataTable).loading = True
        await self.controller.load()
        if self.controller.orders.closed:
            return
        self.query_one(DataTable).loading = False
        self.render_orders()

    def action_reload(self) -> None:
        self.handle_reload()

    def render_orders(self) -> None:
        ctrl = self.controller
        orders = ctrl.orders

        error_label = self.query_one("#label-orders-error", Label)
        error_label.update(orders.error or "")
        error_label.set_class(orders.error is None, "hidden")

        table = self.query_one(DataTable)
        cursor_row = table.cursor_row
        table.clear()
        for o in orders.items:
            table.add_row(
                f"#{short_id(o.id)}",
                ctrl.customer_name(o),
                ctrl.customer_email(o),
                o.phone or "-",
                format_money(o.total_amount),
                status_text(o.status),
                format_timestamp(o.created_at),
                key=o.id,
            )
        if table.row_count:
            table.move_cursor(row=min(cursor_row, table.row_count - 1))
        self.query_one("#label-empty").set_class(bool(orders.items), "hidden")

    def highlighted_order(self) -> Optional[Order]:
        table = self.query_one(DataTable)
        if table.row_count == 0:
            return None
        row_key = table.coordinate_to_cell_key(table.cursor_coordinate).row_key
        return self.controller.orders.find(row_key.value)

    @on(Button.Pressed, "#btn-status")
    @work(exit_on_error=False)
    async def action_change_status(self) -> None:
        order = self.highlighted_order()
        if order is None or self.controller.orders.is_updating(order.id):
            return

        status = await self.app.push_screen_wait(StatusPickerModal(order.status))
        if status is None or self.controller.orders.closed:
            return

        btn_status = self.query_one("#btn-status", Button)
        btn_status.disabled = True
        try:
            ok = await self.controller.change_status(order.id, status)
        finally:
            btn_status.disabled = False
        if self.controller.orders.closed:
            return
        self.render_orders()
        if ok:
            self.notify(f"Order #{short_id(order.id)} is now {status}.")
        else:
            self.notify(self.controller.message or "", severity="error")

    @on(Button.Pressed, "#btn-view")
    def action_view(self) -> None:
        order = self.highlighted_order()
        if order is not None:
            self.navigate(order_path(order.id))

    @on(DataTable.RowSelected, "#table-orders")
    def handle_row_selected(self, event: DataTable.RowSelected) -> None:
        self.navigate(order_path(event.row_key.value))
