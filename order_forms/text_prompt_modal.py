"""Single-line text entry modal screen."""

from __future__ import annotations

import re
from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

_PLAIN_PRICE = re.compile(r"[0-9]+(\.[0-9]+)?\Z")


class TextPromptModal(ModalScreen[str | None]):
    """Prompt for one line of text; dismisses with the text or None."""

    CSS = """
    TextPromptModal {
        align: center middle;
        background: $background 60%;
    }

    #prompt-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #prompt-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #prompt-value {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #prompt-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #prompt-help {
        color: #dddddd;
    }
    """

    def __init__(
        self,
        title: str,
        value: str = "",
        check_value: Callable[[str], str | None] | None = None,
    ) -> None:
        super().__init__()
        self.title_text = title
        self.value = value
        self.check_value = check_value
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="prompt-dialog"):
            yield Static(self.title_text, id="prompt-title")
            yield Static(id="prompt-value")
            yield Static(id="prompt-error")
            yield Static("Enter confirm. Backspace delete. Esc/Ctrl+C cancel.", id="prompt-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self._confirm()
            event.stop()
            return

        if event.key == "backspace":
            if self.value:
                self.value = self.value[:-1]
                self.error = ""
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            self.value += event.character
            self.error = ""
            self._refresh_content()
            event.stop()

    def _confirm(self) -> None:
        value = self.value.strip()
        if self.check_value is not None:
            error = self.check_value(value)
            if error:
                self.error = error
                self._refresh_content()
                return
        self.dismiss(value)

    def _refresh_content(self) -> None:
        self.query_one("#prompt-value", Static).update(Text(f"{self.value}|"))
        self.query_one("#prompt-error", Static).update(self.error or "")


def price_error(value: str) -> str | None:
    """Reject prices that are not empty or a plain decimal number."""
    if not value:
        return None
    if value.startswith("-") and _PLAIN_PRICE.match(value[1:]):
        return "Price cannot be negative."
    if not _PLAIN_PRICE.match(value):
        return "Price must be a number, e.g. 9.50"
    return None
