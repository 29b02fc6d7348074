from typing import Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, DataTable, Label

from controllers.users import UsersController
from gateway.models import ADMIN_ROLE, Profile
from views.base_screen import BaseScreen


class ManageUsersScreen(BaseScreen):
    """
    Every profile with its role. Non-admins can be promoted to admin.
    """

    path = "/manage-users"

    BINDINGS = [
        Binding("a", "make_admin", "Make Admin", show=True),
        Binding("r", "reload", "Refresh", show=True),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.controller = UsersController(self.app.state.gateway)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-users"):
            yield Label("Manage Users", classes="screen-title")
            yield Label("", id="label-users-error", classes="error-box hidden")
            yield DataTable(id="table-users")
            with Horizontal(id="hort-table-control"):
                yield Button("Refresh", id="btn-refresh")
                yield Button("Make Admin", id="btn-make-admin", variant="success")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Email", "Name", "Role")
        self.handle_reload()

    def on_unmount(self) -> None:
        self.controller.close()

    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True, group="load", exit_on_error=False)
    async def handle_reload(self) -> None:
        self.query_one(DataTable).loading = True
        await self.controller.load()
        if self.controller.users.closed:
            return
        self.query_one(DataTable).loading = False
        self.render_users()

    def action_reload(self) -> None:
        self.handle_reload()

    def render_users(self) -> None:
        users = self.controller.users

        error_label = self.query_one("#label-users-error", Label)
        error_label.update(users.error or "")
        error_label.set_class(users.error is None, "hidden")

        table = self.query_one(DataTable)
        table.clear()
        for u in users.items:
            table.add_row(u.email or "-", u.full_name or "-", u.role or "-", key=u.id)
        self.sync_button()

    def highlighted_user(self) -> Optional[Profile]:
        table = self.query_one(DataTable)
        if table.row_count == 0:
            return None
        row_key = table.coordinate_to_cell_key(table.cursor_coordinate).row_key
        return self.controller.users.find(row_key.value)

    def can_promote(self, user: Optional[Profile]) -> bool:
        return (
            user is not None
            and user.role != ADMIN_ROLE
            and not self.controller.users.is_updating(user.id)
        )

    def sync_button(self) -> None:
        self.query_one("#btn-make-admin", Button).disabled = not self.can_promote(
            self.highlighted_user()
        )

    @on(DataTable.RowHighlighted, "#table-users")
    def handle_row_highlighted(self) -> None:
        self.sync_button()

    @on(Button.Pressed, "#btn-make-admin")
    @work(exit_on_error=False)
    async def action_make_admin(self) -> None:
        user = self.highlighted_user()
        if not self.can_promote(user):
            return

        self.query_one("#btn-make-admin", Button).disabled = True
        ok = await self.controller.make_admin(user.id)
        if self.controller.users.closed:
            return
        self.render_users()
        if ok:
            self.notify(f"{user.email} is now an admin.")
        else:
            self.notify(self.controller.message or "", severity="error")
