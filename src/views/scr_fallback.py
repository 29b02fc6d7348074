from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Label

from views.base_screen import BaseScreen


class LandingScreen(BaseScreen):
    """
    Where signed-in non-admins end up. Points at the public storefront.
    """

    path = "/landing"

    def __init__(self) -> None:
        super().__init__()
        self.configure(header_sub_title="Store", show_sidebar=False)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-fallback"):
            yield Label("This console is for store admins.", classes="screen-title")
            yield Label(f"Shop at {self.app.state.storefront_url}", id="label-storefront")
            with Horizontal(classes="hort-fallback"):
                yield Button("Open Store", id="btn-open-store", variant="primary")
                yield Button("Sign in as admin", id="btn-go-login")

    @on(Button.Pressed, "#btn-open-store")
    def handle_open_store(self) -> None:
        self.app.action_open_storefront()

    @on(Button.Pressed, "#btn-go-login")
    def handle_go_login(self) -> None:
        self.navigate("/login")


class NotFoundScreen(BaseScreen):
    """Catch-all for paths no route matches."""

    path = "/not-found"

    def __init__(self, requested: str) -> None:
        super().__init__()
        self.configure(header_sub_title="Not Found", show_sidebar=False)
        self.requested = requested

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-fallback"):
            yield Label("404", classes="screen-title")
            yield Label(f"Nothing lives at {self.requested}.", markup=False)
            with Horizontal(classes="hort-fallback"):
                yield Button("Go to Dashboard", id="btn-go-home", variant="primary")

    @on(Button.Pressed, "#btn-go-home")
    def handle_go_home(self) -> None:
        self.navigate("/")


class ErrorScreen(BaseScreen):
    """
    Shown instead of crashing when a screen fails unexpectedly.
    """

    path = "/error-boundary"

    def __init__(self, message: str = "") -> None:
        super().__init__()
        self.configure(header_sub_title="Error", show_sidebar=False)
        self.message = message or "An unexpected error occurred."

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-fallback"):
            yield Label("Oops! Something went wrong.", classes="screen-title")
            yield Label(self.message, id="label-error-detail", classes="error-box", markup=False)
            with Horizontal(classes="hort-fallback"):
                yield Button("Go to Dashboard", id="btn-go-home", variant="primary")

    @on(Button.Pressed, "#btn-go-home")
    def handle_go_home(self) -> None:
        self.navigate("/")
