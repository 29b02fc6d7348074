from typing import List, Optional

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.screen import ModalScreen, Screen
from textual.widgets import LoadingIndicator
from textual.worker import Worker, WorkerState

from controllers.guard import Access, check_admin_access
from utils.config import Settings, build_gateway, build_uploader
from utils.logger import get_logger
from utils.messages import (
    GoBackMessage,
    NavigateMessage,
    QuitRequestedMessage,
    UserLogoutMessage,
)
from utils.router import NOT_FOUND, Route, resolve
from utils.state import GlobalState
from views.scr_add_product import AddProductScreen
from views.scr_dashboard import DashboardScreen
from views.scr_fallback import ErrorScreen, LandingScreen, NotFoundScreen
from views.scr_login import LoginScreen
from views.scr_manage_orders import ManageOrdersScreen
from views.scr_manage_products import ManageProductsScreen
from views.scr_manage_users import ManageUsersScreen
from views.scr_order_details import OrderDetailsScreen

_logger = get_logger(__name__)


class AdminConsoleApp(App):
    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    CSS_PATH = [
        "views/styles/index.tcss",
        "views/styles/login.tcss",
        "views/styles/tables.tcss",
        "views/styles/forms.tcss",
    ]

    state: GlobalState

    def __init__(self, state: Optional[GlobalState] = None):
        super().__init__()
        if state is None:
            settings = Settings.from_env()
            state = GlobalState(
                gateway=build_gateway(settings),
                uploader=build_uploader(settings),
                storefront_url=settings.storefront_url,
            )
        self.state = state
        self.history: List[str] = []

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        self.navigate("/")

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    def action_open_storefront(self) -> None:
        self.open_url(self.state.storefront_url)
        self.notify(f"Opening {self.state.storefront_url}")

    def build_screen(self, route: Route) -> Screen:
        if route.name == "dashboard":
            return DashboardScreen()
        if route.name == "login":
            return LoginScreen()
        if route.name == "add_product":
            return AddProductScreen()
        if route.name == "manage_products":
            return ManageProductsScreen()
        if route.name == "manage_orders":
            return ManageOrdersScreen()
        if route.name == "order_details":
            return OrderDetailsScreen(route.params["id"])
        if route.name == "manage_users":
            return ManageUsersScreen()
        if route.name == "landing":
            return LandingScreen()
        if route.name == "error":
            return ErrorScreen()
        return NotFoundScreen(route.path)

    async def show_screen(self, screen: Screen) -> None:
        while isinstance(self.screen, ModalScreen):
            await self.pop_screen()
        if len(self.screen_stack) > 1:
            await self.switch_screen(screen)
        else:
            await self.push_screen(screen)

    @work(exclusive=True, group="navigation", exit_on_error=False)
    async def navigate(self, path: str, remember: bool = True) -> None:
        """
        Open the screen for a path. Admin routes are checked first: nobody
        signed in goes to the login screen, a non-admin to the landing page.
        """
        route = resolve(path)
        if route.admin_only:
            access = await check_admin_access(self.state)
            if access is Access.LOGIN:
                route = resolve("/login")
            elif access is Access.LANDING:
                route = resolve("/landing")

        if route.name == NOT_FOUND:
            _logger.info(f"No route for {path!r}")
        _logger.debug(f"Opening {route.path} ({route.name})")

        await self.show_screen(self.build_screen(route))
        if remember and (not self.history or self.history[-1] != route.path):
            self.history.append(route.path)

    def show_error(self, error: Optional[BaseException]) -> None:
        """Replace the failing screen with the error screen."""
        message = str(error) if error is not None else ""
        self.run_worker(
            self.show_screen(ErrorScreen(message)),
            exclusive=True,
            group="navigation",
            exit_on_error=False,
            name="show_error",
        )

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if event.state == WorkerState.ERROR and event.worker.node is self:
            _logger.error(
                f"Navigation failed: {event.worker.error!r}", exc_info=event.worker.error
            )
            if event.worker.name != "show_error":
                self.show_error(event.worker.error)

    @on(NavigateMessage)
    def handle_navigate(self, message: NavigateMessage) -> None:
        self.navigate(message.path)

    @on(GoBackMessage)
    def handle_go_back(self) -> None:
        if self.history:
            self.history.pop()
        previous = self.history[-1] if self.history else "/"
        self.navigate(previous, remember=not self.history)

    @on(UserLogoutMessage)
    @work
    async def handle_user_logout(self):
        await self.state.sign_out()
        self.history.clear()
        self.notify("Logout successful.")
        self.navigate("/login")

    @on(QuitRequestedMessage)
    @work
    async def handle_quit(self):
        if self.state.identity:
            await self.state.sign_out()
        await self.state.gateway.aclose()
        self.exit()


def run() -> None:
    app = AdminConsoleApp()
    app.run()


if __name__ == "__main__":
    run()
