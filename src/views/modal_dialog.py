from typing import Dict, Literal, Optional, Tuple

from typing_extensions import override

from textual import events
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Label, OptionList
from textual.widgets.option_list import Option

from gateway.models import ORDER_STATUSES, STATUS_COLORS
from utils.messages import QuitRequestedMessage

Tone = Literal["default", "positive", "warning", "error"]


class DialogModal(ModalScreen[bool]):
    """
    Yes/no decision point. Dismisses with True for the primary button,
    False for the secondary one or escape.
    """

    VARIANT_MAP: Dict[
        str, Tuple[Literal["primary", "default", "success", "warning", "error"], ...]
    ] = {
        "default": ("primary", "default"),
        "positive": ("success", "default"),
        "warning": ("warning", "default"),
        "error": ("error", "primary"),
    }

    def __init__(
        self,
        caption: str,
        primary_text: str = "OK",
        secondary_text: str = "",
        tone: Tone = "default",
    ):
        super().__init__()
        self.caption = caption
        self.primary_text = primary_text
        self.secondary_text = secondary_text
        self.tone = tone

    def compose(self) -> ComposeResult:
        with Container(id="div-dialog"):
            yield Label(self.caption, id="caption")
            with Horizontal(id="dialog"):
                if self.secondary_text:
                    yield Button(
                        self.secondary_text,
                        variant=DialogModal.VARIANT_MAP[self.tone][1],
                        id="btn-secondary",
                    )
                yield Button(
                    self.primary_text,
                    variant=DialogModal.VARIANT_MAP[self.tone][0],
                    id="btn-primary",
                )

    def on_mount(self):
        # destructive prompts focus the safe answer
        if self.secondary_text and self.tone in ("warning", "error"):
            self.query_one("#btn-secondary").focus()
        else:
            self.query_one("#btn-primary").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(False)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-primary":
            self.dismiss(True)
        if event.button.id == "btn-secondary":
            self.dismiss(False)


class QuitDialogModal(DialogModal):
    def __init__(self):
        super().__init__("Are you sure you want to quit?", "Yes", "No", "error")

    @override
    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-primary":
            self.post_message(QuitRequestedMessage())
            self.dismiss(True)
        else:
            self.dismiss(False)


class StatusPickerModal(ModalScreen[Optional[str]]):
    """
    Pick an order status. Any status can be chosen from any other;
    dismisses with None on escape.
    """

    def __init__(self, current: str) -> None:
        super().__init__()
        self.current = current

    def compose(self) -> ComposeResult:
        with Container(id="div-dialog"):
            yield Label("Set order status", id="caption")
            yield OptionList(
                *[
                    Option(
                        f"[{STATUS_COLORS[s]}]{s.capitalize()}[/]"
                        + ("  (current)" if s == self.current else ""),
                        id=s,
                    )
                    for s in ORDER_STATUSES
                ],
                id="optlist-status",
            )

    def on_mount(self) -> None:
        opt_list = self.query_one(OptionList)
        if self.current in ORDER_STATUSES:
            opt_list.highlighted = ORDER_STATUSES.index(self.current)
        opt_list.focus()

    def on_option_list_option_selected(self, message: OptionList.OptionSelected) -> None:
        self.dismiss(message.option.id)

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(None)


def confirm_with(app: App, tone: Tone = "warning"):
    """
    Build the awaited yes/no step controllers expect: caption -> bool.
    Must be awaited from inside a worker.
    """

    async def confirm(caption: str) -> bool:
        return bool(
            await app.push_screen_wait(
                DialogModal(caption, primary_text="Yes", secondary_text="No", tone=tone)
            )
        )

    return confirm
