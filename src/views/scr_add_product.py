from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.validation import Number
from textual.widgets import Button, Input, Label, TextArea

from controllers.products import (
    MSG_ADDED,
    MSG_UPLOADED,
    MSG_UPLOADING,
    AddProductController,
)
from views.base_screen import BaseScreen

# input id -> form field
FORM_INPUTS = {
    "input-name": "name",
    "input-price": "price",
    "input-stock": "stock",
    "input-category": "category",
}


class AddProductScreen(BaseScreen):
    """
    New product form. The image is uploaded first; the product can only be
    submitted once the host has returned its URL.
    """

    path = "/add-product"

    def __init__(self) -> None:
        super().__init__()
        self.controller = AddProductController(
            self.app.state.gateway, self.app.state.uploader
        )

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with VerticalScroll(id="div-add-product", classes="form"):
            yield Label("Add New Product", classes="screen-title")
            yield Label("", id="label-message", classes="message hidden")
            yield Label("Product Name")
            yield Input(id="input-name")
            yield Label("Price (£)")
            yield Input(
                id="input-price", type="number", validators=[Number(minimum=0.0)]
            )
            yield Label("Available Stock")
            yield Input(id="input-stock", type="integer", validators=[Number(minimum=0)])
            yield Label("Category")
            yield Input(placeholder="e.g. Perfumes, Makeup...", id="input-category")
            yield Label("Upload Product Image")
            with Horizontal(classes="hort-upload"):
                yield Input(placeholder="/path/to/image.jpg", id="input-image-path")
                yield Button("Upload", id="btn-upload")
            yield Label("No image uploaded yet.", id="label-image-url")
            yield Label("Description")
            yield TextArea(id="textarea-description")
            with Vertical(id="div-button"):
                yield Button("Add Product", id="btn-submit", variant="success")

    def on_mount(self) -> None:
        self.query_one("#input-name", Input).focus()

    def on_input_changed(self, message: Input.Changed) -> None:
        field = FORM_INPUTS.get(message.input.id)
        if field:
            setattr(self.controller.form, field, message.value)

    def on_text_area_changed(self, message: TextArea.Changed) -> None:
        self.controller.form.description = message.text_area.text

    def show_message(self, message: str, ok: bool) -> None:
        label = self.query_one("#label-message", Label)
        label.update(message)
        label.set_class(ok, "-success")
        label.set_class(not ok, "-error")
        label.remove_class("hidden")

    def sync_controls(self) -> None:
        ctrl = self.controller
        self.query_one("#btn-submit", Button).disabled = not ctrl.can_submit
        self.query_one("#btn-upload", Button).disabled = ctrl.image.uploading
        self.query_one("#label-image-url", Label).update(
            ctrl.form.image_url or "No image uploaded yet."
        )

    @on(Button.Pressed, "#btn-upload")
    @work(exclusive=True, group="upload", exit_on_error=False)
    async def handle_upload(self) -> None:
        path = self.query_one("#input-image-path", Input).value.strip()
        if not path:
            return

        self.query_one("#btn-upload", Button).disabled = True
        self.query_one("#btn-submit", Button).disabled = True
        self.show_message(MSG_UPLOADING, ok=True)
        ok = await self.controller.upload_image(path)
        self.sync_controls()
        self.show_message(self.controller.message, ok=ok)
        if ok:
            self.notify(MSG_UPLOADED)

    @on(Button.Pressed, "#btn-submit")
    @work(exclusive=True, group="submit", exit_on_error=False)
    async def handle_submit(self) -> None:
        self.query_one("#btn-submit", Button).disabled = True
        product = await self.controller.submit()
        self.sync_controls()

        self.show_message(self.controller.message, ok=product is not None)
        if product is None:
            return

        self.notify(MSG_ADDED)
        self.reset_inputs()

    def reset_inputs(self) -> None:
        for input_id in (*FORM_INPUTS, "input-image-path"):
            self.query_one(f"#{input_id}", Input).value = ""
        self.query_one("#textarea-description", TextArea).text = ""
        self.sync_controls()
