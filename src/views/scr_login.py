from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import Key
from textual.widgets import Button, Input, Label

from controllers.guard import admin_sign_in
from views.base_screen import BaseScreen
from views.modal_dialog import QuitDialogModal


class LoginScreen(BaseScreen):
    """
    Email/password sign-in for admins. Every failure is shown inline
    under the form; only an admin is sent on to the dashboard.
    """

    path = "/login"

    def __init__(self):
        super().__init__()
        self.configure(header_sub_title="Login", show_sidebar=False)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-login"):
            yield Label("Welcome Back!", id="label-login-title")
            yield Label("Login to your account", id="label-login-sub")
            yield Label("", id="label-login-error", classes="error-box hidden")
            yield Label("Email")
            yield Input(placeholder="your@email.com", id="input-login-email")
            yield Label("Password")
            yield Input(
                placeholder="Enter your password", password=True, id="input-login-pwd"
            )
            with Horizontal(id="div-login-btns"):
                yield Button("Quit", id="btn-quit")
                yield Button("Login", id="btn-login", variant="primary")

    def on_mount(self):
        self.query_one("#input-login-email").focus()

    def on_key(self, event: Key) -> None:
        if event.key == "enter" and self.focused == self.query_one("#input-login-pwd"):
            self.handle_login_submit()

    def show_error(self, message: str) -> None:
        label = self.query_one("#label-login-error", Label)
        label.update(message)
        label.remove_class("hidden")

    @on(Button.Pressed, "#btn-login")
    @work(exclusive=True, exit_on_error=False)
    async def handle_login_submit(self) -> None:
        email = self.query_one("#input-login-email", Input).value.strip()
        pwd = self.query_one("#input-login-pwd", Input).value

        if not email or not pwd:
            self.show_error("Email and password are required.")
            return

        btn_login = self.query_one("#btn-login", Button)
        btn_login.disabled = True
        btn_login.label = "Logging in..."
        try:
            error = await admin_sign_in(self.app.state, email, pwd)
        finally:
            btn_login.disabled = False
            btn_login.label = "Login"

        if error:
            self.show_error(error)
            input_login_pwd = self.query_one("#input-login-pwd", Input)
            input_login_pwd.value = ""
            input_login_pwd.focus()
            return

        self.query_one("#label-login-error").add_class("hidden")
        self.notify(f"Hello {self.app.state.identity.email}!")
        self.navigate("/")

    @on(Button.Pressed, "#btn-quit")
    def handle_quit_(self) -> None:
        self.app.push_screen(QuitDialogModal())
