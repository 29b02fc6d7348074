from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Label, ListItem, ListView, Markdown
from textual.worker import Worker, WorkerState

from utils.logger import get_logger
from utils.messages import NavigateMessage, UserLogoutMessage
from utils.pure import generate_markdown_table
from utils.router import NAV_LINKS
from views.modal_dialog import DialogModal, QuitDialogModal

_logger = get_logger(__name__)


def _item_id(path: str) -> str:
    return "list-menu-item-" + (path.strip("/") or "home")


class Sidebar(Container):
    """
    Navigation chrome shared by every admin screen.
    """

    def __init__(self, current_path: str = "/") -> None:
        super().__init__()
        self.current_path = current_path

    def compose(self) -> ComposeResult:
        yield Label("Signed in", id="label-info-1")
        yield Markdown("", id="md-userinfo")
        yield Button("Log out", id="btn-logout", variant="error")
        yield Label("Menu", id="label-info-2")
        yield ListView(
            *[
                ListItem(Label(title), id=_item_id(path))
                for path, title in NAV_LINKS.items()
            ],
            id="list-menu",
        )
        yield Label("[@click=app.open_storefront()]View Site[/]", id="link-storefront")

    async def on_mount(self):
        state = self.app.state
        if state.identity:
            table_rows = [
                ["Email", state.identity.email],
                ["Role", (state.role or "-").capitalize()],
            ]
            md_table_str = generate_markdown_table(None, table_rows, ["l", "l"])
            await self.query_one(Markdown).update(md_table_str)
        self.highlight_item(self.current_path)

    def highlight_item(self, path: str):
        for item in self.query_one("#list-menu").children:
            item.highlighted = item.id == _item_id(path)

    async def on_list_view_selected(self, event: ListView.Selected):
        for path in NAV_LINKS:
            if event.item.id == _item_id(path):
                if path != self.current_path:
                    self.post_message(NavigateMessage(path))
                else:
                    self.highlight_item(self.current_path)
                return

    @on(Button.Pressed, "#btn-logout")
    @work()
    async def handle_logout(self):
        if not await self.app.push_screen_wait(
            DialogModal(
                "Are you sure you want to log out?",
                primary_text="Yes",
                secondary_text="No",
                tone="warning",
            )
        ):
            return

        self.post_message(UserLogoutMessage())


class BaseScreen(Screen):
    """
    Inherited by all screens, contains common elements like
    headers, footers, sidebar, and keybindings.

    A worker on any screen that dies with an unexpected exception sends the
    operator to the error screen instead of crashing the app.
    """

    BINDINGS = [
        Binding("ctrl+z", "quit", "Quit App", show=True),
    ]

    path = "/"

    def __init__(self):
        super().__init__()

        self.configure()

    def configure(
        self,
        header_sub_title: str = "Admin",
        show_sidebar: bool = True,
    ) -> None:
        """
        configure behavior of the base screen
        :return:
        """
        self.title = "Admin Dashboard"
        self.sub_title = NAV_LINKS.get(self.path, header_sub_title)
        self._show_sidebar = show_sidebar

    def compose(self) -> ComposeResult:
        if self._show_sidebar:
            yield Sidebar(self.path)
        yield Header()
        yield Footer(show_command_palette=False)

    def navigate(self, path: str) -> None:
        self.post_message(NavigateMessage(path))

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if event.state == WorkerState.ERROR:
            error = event.worker.error
            _logger.error(
                f"Unhandled error in {type(self).__name__}: {error!r}",
                exc_info=error,
            )
            self.app.show_error(error)

    @work()
    async def action_quit(self):
        await self.app.push_screen_wait(QuitDialogModal())
