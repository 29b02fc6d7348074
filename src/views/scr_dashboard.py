from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, Label, LoadingIndicator, Static

from controllers.dashboard import DashboardController
from views.base_screen import BaseScreen


class StatCard(Vertical):
    def __init__(self, title: str, card_id: str) -> None:
        super().__init__(id=card_id, classes="stat-card")
        self._title = title

    def compose(self) -> ComposeResult:
        yield Label(self._title, classes="stat-title")
        yield Static("-", classes="stat-value")

    def set_value(self, value: str) -> None:
        self.query_one(".stat-value", Static).update(value)


class DashboardScreen(BaseScreen):
    """
    Store statistics plus shortcuts to the common admin tasks.
    """

    path = "/"

    def __init__(self) -> None:
        super().__init__()
        self.controller = DashboardController(self.app.state.gateway)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-dashboard"):
            yield Label("Admin Dashboard", classes="screen-title")
            yield Label("", id="label-dashboard-error", classes="error-box hidden")
            yield LoadingIndicator(id="loading-dashboard")
            with Horizontal(id="hort-stats"):
                yield StatCard("Products", "card-products")
                yield StatCard("Users", "card-users")
                yield StatCard("Last Update", "card-updated")
            yield Label("Quick Actions", classes="section-title")
            with Horizontal(id="hort-actions"):
                yield Button("Add Product", id="btn-go-add", variant="primary")
                yield Button("Manage Products", id="btn-go-products")
                yield Button("Manage Users", id="btn-go-users")
                yield Button("Refresh", id="btn-refresh")

    @on(ScreenResume)
    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True, exit_on_error=False)
    async def handle_reload(self) -> None:
        self.query_one("#loading-dashboard").remove_class("hidden")
        await self.controller.load()
        self.query_one("#loading-dashboard").add_class("hidden")

        error_label = self.query_one("#label-dashboard-error", Label)
        if self.controller.error:
            error_label.update(self.controller.error)
            error_label.remove_class("hidden")
            return
        error_label.add_class("hidden")

        self.query_one("#card-products", StatCard).set_value(str(self.controller.products))
        self.query_one("#card-users", StatCard).set_value(str(self.controller.users))
        self.query_one("#card-updated", StatCard).set_value(
            self.controller.last_update.strftime("%Y-%m-%d %H:%M:%S")
        )

    @on(Button.Pressed, "#btn-go-add")
    def handle_go_add(self) -> None:
        self.navigate("/add-product")

    @on(Button.Pressed, "#btn-go-products")
    def handle_go_products(self) -> None:
        self.navigate("/manage-products")

    @on(Button.Pressed, "#btn-go-users")
    def handle_go_users(self) -> None:
        self.navigate("/manage-users")
