from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import Button, DataTable, Label, LoadingIndicator, Markdown

from controllers.orders import OrderDetailController
from utils.messages import GoBackMessage
from utils.pure import format_money, format_timestamp, generate_markdown_table, short_id
from views.base_screen import BaseScreen
from views.modal_dialog import StatusPickerModal
from views.scr_manage_orders import status_text


class OrderDetailsScreen(BaseScreen):
    """
    One order: customer, shipping details, status and line items.
    """

    path = "/manage-orders"

    BINDINGS = [
        Binding("escape", "back", "Back", show=True),
        Binding("s", "change_status", "Change Status", show=True),
    ]

    def __init__(self, order_id: str) -> None:
        super().__init__()
        self.sub_title = "Order Details"
        self.controller = OrderDetailController(self.app.state.gateway, order_id)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with VerticalScroll(id="div-order-details"):
            yield Button("< Back", id="btn-back")
            yield LoadingIndicator(id="loading-order")
            yield Label("", id="label-order-title", classes="screen-title")
            yield Label("Order not found", id="label-not-found", classes="error-box hidden")
            with Vertical(id="div-order-body", classes="hidden"):
                yield Markdown("", id="md-order-info")
                with Horizontal(id="hort-status"):
                    yield Label("", id="label-status")
                    yield Button("Change Status", id="btn-status", variant="warning")
                yield Label("Order Items", classes="section-title")
                yield DataTable(id="table-items")
                yield Label("", id="label-total", classes="order-total")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.add_columns("Product", "Price", "Qty", "Subtotal", "Image")
        self.handle_load()

    def on_unmount(self) -> None:
        self.controller.close()

    @work(exclusive=True, group="load", exit_on_error=False)
    async def handle_load(self) -> None:
        await self.controller.load()
        if self.controller.closed:
            return
        self.query_one("#loading-order").add_class("hidden")
        await self.render_order()

    async def render_order(self) -> None:
        ctrl = self.controller
        order = ctrl.order

        self.query_one("#label-not-found").set_class(not ctrl.not_found, "hidden")
        self.query_one("#div-order-body").set_class(order is None, "hidden")
        if order is None:
            self.query_one("#label-order-title", Label).update("")
            return

        self.query_one("#label-order-title", Label).update(
            f"Order #{short_id(order.id)}"
        )
        info_rows = [
            ["Customer", ctrl.customer_name],
            ["Email", ctrl.customer_email],
            ["Phone", order.phone or "-"],
            ["Address", order.shipping_address or "-"],
            ["Placed", format_timestamp(order.created_at)],
        ]
        await self.query_one("#md-order-info", Markdown).update(
            generate_markdown_table(["Field", "Value"], info_rows, ["l", "l"])
        )
        self.render_status()

        table = self.query_one(DataTable)
        table.clear()
        for item in ctrl.items:
            table.add_row(
                item.product_name or "-",
                format_money(item.price),
                str(item.quantity),
                format_money(item.subtotal),
                item.product_image_url or "-",
            )
        self.query_one("#label-total", Label).update(
            f"Total: {format_money(ctrl.total)}"
        )

    def render_status(self) -> None:
        ctrl = self.controller
        label = self.query_one("#label-status", Label)
        if ctrl.updating:
            label.update("Updating...")
        else:
            label.update(status_text(ctrl.order.status))
        self.query_one("#btn-status", Button).disabled = ctrl.updating

    @on(Button.Pressed, "#btn-status")
    @work(exclusive=True, group="status", exit_on_error=False)
    async def action_change_status(self) -> None:
        ctrl = self.controller
        if ctrl.order is None or ctrl.updating:
            return

        status = await self.app.push_screen_wait(StatusPickerModal(ctrl.order.status))
        if status is None:
            return

        self.query_one("#btn-status", Button).disabled = True
        ok = await ctrl.change_status(status)
        if ctrl.closed:
            return
        self.render_status()
        if ok:
            self.notify(f"Order status set to {status}.")
        else:
            self.notify(ctrl.message or "", severity="error")

    @on(Button.Pressed, "#btn-back")
    def action_back(self) -> None:
        self.post_message(GoBackMessage())
