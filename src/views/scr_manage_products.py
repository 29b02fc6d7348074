from typing import Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, DataTable, Label, Select

from controllers.products import ProductsController
from gateway.models import Product
from utils.pure import ALL_CATEGORIES, format_money
from views.base_screen import BaseScreen
from views.modal_dialog import confirm_with
from views.modal_edit_product import EditProductModal


class ManageProductsScreen(BaseScreen):
    """
    Every product newest first, narrowed by category. Edit opens a modal,
    delete asks for confirmation first.
    """

    path = "/manage-products"

    BINDINGS = [
        Binding("e", "edit", "Edit", show=True),
        Binding("d", "delete", "Delete", show=True),
        Binding("r", "reload", "Refresh", show=True),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.controller = ProductsController(self.app.state.gateway)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-products"):
            yield Label("Manage Products", classes="screen-title")
            yield Label("", id="label-products-error", classes="error-box hidden")
            yield Select(
                [(ALL_CATEGORIES, 0)],
                value=0,
                allow_blank=False,
                id="select-category",
            )
            yield DataTable(id="table-products")
            yield Label("No products found", id="label-empty", classes="hidden")
            with Horizontal(id="hort-table-control"):
                yield Button("Refresh", id="btn-refresh")
                yield Button("Edit", id="btn-edit", variant="primary")
                yield Button("Delete", id="btn-delete", variant="error")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Name", "Category", "Price", "Stock", "Image")
        self.handle_reload()

    def on_unmount(self) -> None:
        self.controller.close()

    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True, group="load", exit_on_error=False)
    async def handle_reload(self) -> None:
        self.query_one(DataTable).loading = True
        await self.controller.load()
        if self.controller.products.closed:
            return
        self.query_one(DataTable).loading = False
        self.render_products()

    def action_reload(self) -> None:
        self.handle_reload()

    def render_products(self) -> None:
        ctrl = self.controller

        error_label = self.query_one("#label-products-error", Label)
        error_label.update(ctrl.products.error or "")
        error_label.set_class(ctrl.products.error is None, "hidden")

        # Select values are option positions; the "All" option carries None
        options = ctrl.category_options
        select = self.query_one("#select-category", Select)
        with select.prevent(Select.Changed):
            select.set_options([(label, idx) for idx, (label, _) in enumerate(options)])
            select.value = [value for _, value in options].index(ctrl.selected_category)

        table = self.query_one(DataTable)
        table.clear()
        for p in ctrl.visible:
            table.add_row(
                p.name,
                p.category,
                format_money(p.price, "£"),
                str(p.stock),
                "yes" if p.image_url else "-",
                key=p.id,
            )
        self.query_one("#label-empty").set_class(bool(ctrl.visible), "hidden")

    @on(Select.Changed, "#select-category")
    def handle_category(self, event: Select.Changed) -> None:
        if event.value == Select.BLANK:
            return
        options = self.controller.category_options
        idx = int(event.value)
        self.controller.select_category(options[idx][1] if idx < len(options) else None)
        self.render_products()

    def highlighted_product(self) -> Optional[Product]:
        table = self.query_one(DataTable)
        if table.row_count == 0:
            return None
        row_key = table.coordinate_to_cell_key(table.cursor_coordinate).row_key
        return self.controller.products.find(row_key.value)

    @on(Button.Pressed, "#btn-edit")
    @work(exclusive=True, group="mutate", exit_on_error=False)
    async def action_edit(self) -> None:
        product = self.highlighted_product()
        if product is None or self.controller.products.is_updating(product.id):
            return
        if await self.app.push_screen_wait(EditProductModal(self.controller, product)):
            self.notify(f"{product.name} updated.")
            self.render_products()

    @on(Button.Pressed, "#btn-delete")
    @work(exclusive=True, group="mutate", exit_on_error=False)
    async def action_delete(self) -> None:
        product = self.highlighted_product()
        if product is None or self.controller.products.is_updating(product.id):
            return
        deleted = await self.controller.delete_product(
            product.id, confirm_with(self.app, tone="error")
        )
        if deleted:
            self.notify(f"{product.name} deleted.")
            self.render_products()
        elif self.controller.message:
            self.notify(self.controller.message, severity="error")
