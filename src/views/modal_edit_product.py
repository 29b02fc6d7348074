from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, TextArea

from controllers.products import ImageSlot, ProductForm, ProductsController
from gateway.models import Product


class EditProductModal(ModalScreen[bool]):
    """
    Edit form for one product. Dismisses with True once the change is saved
    (the controller has already reloaded the list), False on cancel.
    """

    def __init__(self, controller: ProductsController, product: Product) -> None:
        super().__init__()
        self.controller = controller
        self.product = product
        self.form = ProductForm.from_product(product)
        self.image = ImageSlot(self.app.state.uploader, self.form)

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="div-edit-product", classes="form"):
            yield Label("Edit Product", classes="screen-title")
            yield Label("", id="label-edit-message", classes="message hidden")
            yield Input(self.form.name, placeholder="Product name", id="edit-name")
            yield Input(self.form.price, placeholder="Price", id="edit-price", type="number")
            yield Input(self.form.category, placeholder="Category", id="edit-category")
            yield Input(
                self.form.stock, placeholder="Stock quantity", id="edit-stock", type="integer"
            )
            yield Label("Product Image")
            yield Label(self.form.image_url or "-", id="label-edit-image")
            with Horizontal(classes="hort-upload"):
                yield Input(placeholder="/path/to/new-image.jpg", id="edit-image-path")
                yield Button("Upload", id="btn-edit-upload")
            yield TextArea(self.form.description, id="edit-description")
            with Horizontal(id="hort-edit-buttons"):
                yield Button("Cancel", id="btn-cancel")
                yield Button("Save", id="btn-save", variant="primary")

    def on_mount(self) -> None:
        self.query_one("#edit-name", Input).focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(False)

    def on_input_changed(self, message: Input.Changed) -> None:
        field = message.input.id.removeprefix("edit-")
        if field in ("name", "price", "category", "stock"):
            setattr(self.form, field, message.value)

    def on_text_area_changed(self, message: TextArea.Changed) -> None:
        self.form.description = message.text_area.text

    def show_message(self, message: str) -> None:
        label = self.query_one("#label-edit-message", Label)
        label.update(message)
        label.remove_class("hidden")

    @on(Button.Pressed, "#btn-edit-upload")
    @work(exclusive=True, group="upload", exit_on_error=False)
    async def handle_upload(self) -> None:
        path = self.query_one("#edit-image-path", Input).value.strip()
        if not path:
            return
        self.query_one("#btn-save", Button).disabled = True
        self.query_one("#btn-edit-upload", Button).disabled = True
        self.show_message("Uploading...")

        await self.image.upload(path)

        self.query_one("#btn-save", Button).disabled = False
        self.query_one("#btn-edit-upload", Button).disabled = False
        self.query_one("#label-edit-image", Label).update(self.form.image_url or "-")
        self.show_message(self.image.message)

    @on(Button.Pressed, "#btn-save")
    @work(exclusive=True, group="save", exit_on_error=False)
    async def handle_save(self) -> None:
        if self.image.uploading:
            return
        self.query_one("#btn-save", Button).disabled = True
        ok = await self.controller.update_product(self.product.id, self.form)
        self.query_one("#btn-save", Button).disabled = False
        if not ok:
            self.show_message(self.controller.message or "Update failed!")
            return
        self.dismiss(True)

    @on(Button.Pressed, "#btn-cancel")
    def handle_cancel(self) -> None:
        self.dismiss(False)
