"""Link target picker modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from order_forms.links import link_targets
from order_forms.models import Section
from order_forms.rendering import format_form_label

# Dismiss value meaning "remove the link".
UNLINK = ""


class LinkFormModal(ModalScreen[str | None]):
    """Pick the form a question (or the whole form) should lead to.

    Dismisses with the chosen form id, ``UNLINK`` to clear the link, or None
    when cancelled.
    """

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("ctrl+c", "close", "Close"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("enter", "choose_current", "Choose"),
    ]

    CSS = """
    LinkFormModal {
        align: center middle;
        background: $background 60%;
    }

    #link-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #link-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #link-body {
        margin-bottom: 1;
        color: white;
    }

    #link-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    cursor_index = reactive(0)

    def __init__(self, title: str, sections: list[Section], exclude_form_id: str | None = None) -> None:
        super().__init__()
        self.title_text = title
        self.sections = sections
        self.targets = link_targets(sections, exclude_form_id)

    def compose(self) -> ComposeResult:
        with Container(id="link-dialog"):
            yield Static(self.title_text, id="link-title")
            yield Static(id="link-body")
            yield Static("J/K/↑/↓ move, Enter choose, Esc/q/Ctrl+C close", id="link-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def action_close(self) -> None:
        self.dismiss(None)

    def action_move_cursor(self, delta: int) -> None:
        rows = self._row_count()
        self.cursor_index = (self.cursor_index + delta) % rows
        self._refresh_content()

    def action_choose_current(self) -> None:
        if self.cursor_index >= len(self.targets):
            self.dismiss(UNLINK)
            return
        _, form = self.targets[self.cursor_index]
        self.dismiss(form.id)

    def _row_count(self) -> int:
        # One extra row for "remove link".
        return len(self.targets) + 1

    def _refresh_content(self) -> None:
        body = self.query_one("#link-body", Static)
        if self.cursor_index >= self._row_count():
            self.cursor_index = self._row_count() - 1

        content = Text(style="white")
        last_section_id: str | None = None
        for idx, (section, form) in enumerate(self.targets):
            if section.id != last_section_id:
                if last_section_id is not None:
                    content.append("\n")
                content.append(f"{section.name}\n", style="bold underline")
                last_section_id = section.id
            pointer = "➤ " if idx == self.cursor_index else "  "
            content.append(pointer)
            content.append_text(format_form_label(form))
            content.append("\n")

        pointer = "➤ " if self.cursor_index == len(self.targets) else "  "
        content.append(f"\n{pointer}(remove link)", style="dim")
        body.update(content)
