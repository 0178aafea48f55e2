"""Main Textual app class."""

from __future__ import annotations

import sqlite3
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from order_forms.config import DEBUG_LOG_PATH, export_dir
from order_forms.csv_import import CsvFormatError, import_form_csv
from order_forms.export import ExportValidationError, export_bundle
from order_forms.link_modal import LinkFormModal
from order_forms.models import (
    CUSTOM_FORM_TYPE,
    FORM_TYPES,
    GLOBAL_LINK_SOURCE,
    MAIN_QUESTION_INPUT,
    EditorState,
    Form,
    Question,
    new_form,
    new_section,
)
from order_forms.mutations import auto_select
from order_forms.persistence import bootstrap_schema, clear_snapshot, load_snapshot, save_snapshot
from order_forms.rendering import format_form_label, format_link_label, format_question_line
from order_forms.store import FormStore
from order_forms.text_prompt_modal import TextPromptModal, price_error


class OrderFormsApp(App):
    """A Textual app for composing the order forms of a restaurant bot."""

    TITLE = "Order Forms"
    SUB_TITLE = "Welcome / Menu / Items / Add-ons"

    CSS = """
    Screen {
        layout: vertical;
    }

    #sections-bar {
        height: 3;
        border: round $primary;
        padding: 0 1;
    }

    #main-layout {
        height: 1fr;
    }

    #forms-pane {
        width: 2fr;
        border: round $primary;
        padding: 1;
    }

    #form-pane {
        width: 3fr;
        border: round $secondary;
        padding: 1;
    }

    #forms-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #form-detail {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #status-bar {
        height: auto;
        border: heavy $secondary;
        padding: 0 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    question_index = reactive(0)

    BINDINGS = [
        ("left_square_bracket", "cycle_section(-1)", "Prev section"),
        ("right_square_bracket", "cycle_section(1)", "Next section"),
        ("less_than_sign", "move_section(-1)", "Move section left"),
        ("greater_than_sign", "move_section(1)", "Move section right"),
        ("j", "cycle_form(1)", "Next form"),
        ("k", "cycle_form(-1)", "Previous form"),
        ("up", "move_question(-1)", "Previous question"),
        ("down", "move_question(1)", "Next question"),
        ("s", "new_section", "New section"),
        ("u", "rename_section", "Rename section"),
        Binding("ctrl+d", "delete_section", "Delete section", priority=True),
        ("n", "new_form", "New form"),
        ("r", "rename_form", "Rename form"),
        ("y", "cycle_form_type", "Form type"),
        ("c", "edit_company", "Company"),
        ("x", "delete_form", "Delete form"),
        ("a", "add_question", "Add question"),
        ("d", "remove_question", "Remove question"),
        ("e", "edit_text", "Edit text"),
        ("p", "edit_price", "Edit price"),
        ("t", "toggle_price", "Toggle price"),
        ("l", "link_question", "Link question"),
        ("g", "link_global", "Global link"),
        ("i", "import_csv", "Import CSV"),
        Binding("ctrl+e", "export", "Export", priority=True),
        Binding("ctrl+r", "reset", "Reset", priority=True),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, store: FormStore | None = None, persist: bool = True, output_dir: str | None = None) -> None:
        super().__init__()
        self.store = store if store is not None else FormStore()
        self.persist = persist
        self.output_dir = output_dir
        self.system_status = ""
        self._debug_log_path = Path(DEBUG_LOG_PATH)
        self._log_debug("app_init")

    def _log_debug(self, message: str) -> None:
        try:
            ts = datetime.now(timezone.utc).isoformat()
            self._debug_log_path.parent.mkdir(parents=True, exist_ok=True)
            with self._debug_log_path.open("a", encoding="utf-8") as fh:
                fh.write(f"{ts} {message}\n")
        except Exception:
            # Logging must never interfere with app flow.
            return

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(id="sections-bar")
        with Horizontal(id="main-layout"):
            with Vertical(id="forms-pane"):
                yield Static("Forms", classes="pane-title")
                yield Static("(no forms yet)", id="forms-list")
            with Vertical(id="form-pane"):
                yield Static("Form", classes="pane-title")
                yield Static(id="form-detail")
        yield Static(id="status-bar")

    def on_mount(self) -> None:
        if self.persist:
            bootstrap_schema()
            snapshot = load_snapshot()
            if snapshot is not None:
                self.store.state = auto_select(snapshot)
                self._log_debug("on_mount snapshot_loaded")
            self.store.subscribe(self._persist)
        self.store.subscribe(self._on_state_change)
        self._refresh_all()

    def _persist(self, state: EditorState) -> None:
        try:
            save_snapshot(state)
        except sqlite3.Error as exc:
            self.system_status = f"Autosave failed: {exc}"
            self._log_debug(f"persist_failed error={exc!r}")

    def _on_state_change(self, state: EditorState) -> None:
        self._refresh_all()

    def _modal_open(self) -> bool:
        return isinstance(self.screen, ModalScreen)

    def _set_status(self, message: str) -> None:
        self.system_status = message
        self._refresh_status()

    def _prompt(self, title: str, on_value, value: str = "", check_value=None) -> None:
        def handle(result: str | None) -> None:
            if result is None:
                return
            on_value(result)

        self.push_screen(TextPromptModal(title, value=value, check_value=check_value), handle)

    # Selection helpers

    def _selected_question(self) -> Question | None:
        form = self.store.current_form
        if form is None:
            return None
        if self.question_index == 0:
            return form.main_question
        if 0 < self.question_index <= len(form.questions):
            return form.questions[self.question_index - 1]
        return None

    # Sections

    def action_cycle_section(self, delta: int) -> None:
        if self._modal_open():
            return
        sections = self.store.state.sections
        if not sections:
            return
        ids = [section.id for section in sections]
        current = self.store.state.current_section_id
        idx = ids.index(current) if current in ids else 0
        target = sections[(idx + delta) % len(sections)]
        self.store.set_current_section(target.id)
        self.store.set_current_form(target.forms[0].id if target.forms else None)
        self.question_index = 0
        self._refresh_all()

    def action_move_section(self, delta: int) -> None:
        if self._modal_open():
            return
        ids = [section.id for section in self.store.state.sections]
        current = self.store.state.current_section_id
        if current not in ids:
            return
        idx = ids.index(current)
        self.store.reorder_sections(idx, idx + delta)

    def action_new_section(self) -> None:
        if self._modal_open():
            return

        def create(name: str) -> None:
            if not name:
                self._set_status("Section name cannot be empty")
                return
            section = new_section(name)
            self.store.add_section(section)
            self.store.set_current_section(section.id)
            self.store.set_current_form(None)
            self.question_index = 0
            self._set_status(f"Section added: {name}")

        self._prompt("New section", create)

    def action_rename_section(self) -> None:
        if self._modal_open():
            return
        section = self.store.current_section
        if section is None:
            return

        def rename(name: str) -> None:
            if name:
                self.store.update_section(replace(section, name=name))

        self._prompt("Rename section", rename, value=section.name)

    def action_delete_section(self) -> None:
        if self._modal_open():
            return
        section = self.store.current_section
        if section is None:
            return
        if section.is_default:
            self._set_status("Default sections cannot be deleted")
            return
        self.store.delete_section(section.id)
        self.question_index = 0
        self._set_status(f"Section deleted: {section.name}")

    # Forms

    def action_cycle_form(self, delta: int) -> None:
        if self._modal_open():
            return
        section = self.store.current_section
        if section is None or not section.forms:
            return
        ids = [form.id for form in section.forms]
        current = self.store.state.current_form_id
        if current in ids:
            idx = (ids.index(current) + delta) % len(ids)
        else:
            idx = 0 if delta > 0 else len(ids) - 1
        self.store.set_current_form(ids[idx])
        self.question_index = 0
        self._refresh_all()

    def action_new_form(self) -> None:
        if self._modal_open():
            return
        section = self.store.current_section
        if section is None:
            return
        form = new_form()
        self.store.add_form(section.id, form)
        self.question_index = 0

        def name_form(name: str) -> None:
            current = self.store.current_form
            if current is not None and current.id == form.id:
                self.store.update_form(replace(current, name=name))

        self._prompt("Form name (e.g. Menu Pizza, Desserts)", name_form)

    def action_rename_form(self) -> None:
        if self._modal_open():
            return
        form = self.store.current_form
        if form is None:
            return

        def rename(name: str) -> None:
            current = self.store.current_form
            if current is not None and current.id == form.id:
                self.store.update_form(replace(current, name=name))

        self._prompt("Rename form", rename, value=form.name)

    def action_cycle_form_type(self) -> None:
        if self._modal_open():
            return
        form = self.store.current_form
        if form is None:
            return
        idx = FORM_TYPES.index(form.type) if form.type in FORM_TYPES else 0
        next_type = FORM_TYPES[(idx + 1) % len(FORM_TYPES)]
        self.store.update_form(replace(form, type=next_type))

    def action_edit_company(self) -> None:
        if self._modal_open():
            return
        form = self.store.current_form
        if form is None:
            return
        if not form.is_welcome:
            self._set_status("Company name only applies to the welcome form")
            return

        def set_company(name: str) -> None:
            current = self.store.current_form
            if current is not None and current.id == form.id:
                self.store.update_form(replace(current, company_name=name))

        self._prompt("Company name", set_company, value=form.company_name or "")

    def action_delete_form(self) -> None:
        if self._modal_open():
            return
        form = self.store.current_form
        if form is None:
            return
        if form.type != CUSTOM_FORM_TYPE:
            self._set_status("Only custom forms can be deleted")
            return
        self.store.delete_form(form.id)
        self.question_index = 0
        self._set_status("Form deleted")

    # Questions

    def action_move_question(self, delta: int) -> None:
        if self._modal_open():
            return
        form = self.store.current_form
        if form is None:
            return
        self.question_index = (self.question_index + delta) % (len(form.questions) + 1)
        self._refresh_form()

    def action_add_question(self) -> None:
        if self._modal_open():
            return
        if self.store.current_form is None:
            self._set_status("Select a form first")
            return
        self.store.add_question()
        form = self.store.current_form
        self.question_index = len(form.questions) if form is not None else 0
        self._refresh_form()

    def action_remove_question(self) -> None:
        if self._modal_open():
            return
        question = self._selected_question()
        if question is None:
            return
        if question.is_main:
            self._set_status("The main question cannot be removed")
            return
        self.store.remove_question(question.input)
        self._refresh_form()

    def action_edit_text(self) -> None:
        if self._modal_open():
            return
        question = self._selected_question()
        if question is None:
            return
        if not question.editable:
            self._set_status("This text is locked")
            return
        title = "Main question (fr)" if question.is_main else f"Question {question.input} (fr)"
        self._prompt(title, lambda text: self.store.update_question(question.input, text_fr=text), value=question.text_fr)

    def action_edit_price(self) -> None:
        if self._modal_open():
            return
        question = self._selected_question()
        if question is None or question.is_main:
            return
        self._prompt(
            f"Price of question {question.input}",
            lambda price: self.store.update_question(question.input, price=price),
            value=question.price or "",
            check_value=price_error,
        )

    def action_toggle_price(self) -> None:
        if self._modal_open():
            return
        question = self._selected_question()
        if question is None or question.is_main:
            return
        self.store.update_question(question.input, show_price=not question.show_price)

    # Links

    def _open_link_modal(self, title: str) -> None:
        form = self.store.current_form
        self.push_screen(
            LinkFormModal(title, self.store.state.sections, exclude_form_id=form.id if form else None),
            self._finish_link,
        )

    def _finish_link(self, result: str | None) -> None:
        if result is None:
            self.store.cancel_link()
            return
        self.store.link_forms(result or None)

    def action_link_question(self) -> None:
        if self._modal_open():
            return
        question = self._selected_question()
        if question is None or question.input == MAIN_QUESTION_INPUT:
            self._set_status("Select a question to link")
            return
        self.store.begin_link(question.input)
        self._open_link_modal(f"Link question {question.input} to a form")

    def action_link_global(self) -> None:
        if self._modal_open():
            return
        if self.store.current_form is None:
            return
        self.store.begin_link(GLOBAL_LINK_SOURCE)
        self._open_link_modal("Global link for every question")

    # Import / export

    def action_import_csv(self) -> None:
        if self._modal_open():
            return
        section = self.store.current_section
        if section is None:
            return

        def do_import(path: str) -> None:
            try:
                form = import_form_csv(path)
            except (CsvFormatError, OSError) as exc:
                self._set_status(f"Import failed: {exc}")
                self._log_debug(f"import_failed path={path!r} error={exc!r}")
                return
            self.store.add_form(section.id, form)
            self.question_index = 0
            self._set_status(f"Imported {form.name or path}")

        self._prompt("CSV file to import", do_import)

    def action_export(self) -> None:
        self._log_debug(f"export_enter screen={type(self.screen).__name__}")
        if self._modal_open():
            return
        try:
            target = export_bundle(self.store.state.sections, self.output_dir or export_dir())
        except ExportValidationError as exc:
            shown = "\n".join(exc.errors[:5])
            more = f"\n… and {len(exc.errors) - 5} more" if len(exc.errors) > 5 else ""
            self._set_status(f"Export blocked ({len(exc.errors)} problems):\n{shown}{more}")
            self._log_debug(f"export_blocked errors={len(exc.errors)}")
            return
        except OSError as exc:
            self._set_status(f"Export failed: {exc}")
            self._log_debug(f"export_failed error={exc!r}")
            return
        self._set_status(f"Exported: {target}")
        self._log_debug(f"export_done path={target}")

    def action_reset(self) -> None:
        if self._modal_open():
            return
        if self.persist:
            clear_snapshot()
        self.store.reset()
        self.question_index = 0
        self._set_status("Reset to default forms")

    # Rendering

    def _refresh_all(self) -> None:
        self._refresh_sections()
        self._refresh_forms()
        self._refresh_form()
        self._refresh_status()

    def _refresh_sections(self) -> None:
        try:
            bar = self.query_one("#sections-bar", Static)
        except NoMatches:
            return
        text = Text()
        for idx, section in enumerate(self.store.state.sections):
            if idx > 0:
                text.append(" │ ", style="dim")
            if section.id == self.store.state.current_section_id:
                text.append(f" {section.name} ", style="bold #ffffff on #2f6db5")
            else:
                text.append(section.name)
        bar.update(text)

    def _refresh_forms(self) -> None:
        try:
            forms_widget = self.query_one("#forms-list", Static)
        except NoMatches:
            return
        section = self.store.current_section
        if section is None or not section.forms:
            forms_widget.update("(no forms yet)")
            return

        lines = Text()
        for idx, form in enumerate(section.forms):
            if idx > 0:
                lines.append("\n")
            pointer = "➤ " if form.id == self.store.state.current_form_id else "  "
            lines.append(pointer)
            lines.append_text(format_form_label(form))
        forms_widget.update(lines)

    def _refresh_form(self) -> None:
        try:
            detail = self.query_one("#form-detail", Static)
        except NoMatches:
            return
        form = self.store.current_form
        if form is None:
            detail.update("(select or create a form)")
            return

        if self.question_index > len(form.questions):
            self.question_index = len(form.questions)
        detail.update(self._form_text(form))

    def _form_text(self, form: Form) -> Text:
        sections = self.store.state.sections
        text = Text()
        text.append_text(format_form_label(form))
        text.append(f"  ({form.id})", style="dim")
        if form.is_welcome:
            text.append("\nCompany: ")
            text.append(form.company_name or "(missing)", style="bold" if form.company_name else "bold #ffb3b3")
        text.append("\nGlobal link: ")
        text.append_text(format_link_label(sections, form.global_link))
        text.append("\n\n")

        pointer = "➤ " if self.question_index == 0 else "  "
        text.append(pointer)
        text.append("0. ", style="bold")
        text.append(form.main_question.text_fr or "(main question is empty)", style="bold white")

        for idx, question in enumerate(form.questions, start=1):
            text.append("\n")
            text.append("➤ " if idx == self.question_index else "  ")
            text.append_text(format_question_line(question, sections))
        return text

    def _refresh_status(self) -> None:
        try:
            bar = self.query_one("#status-bar", Static)
        except NoMatches:
            return
        status = self.system_status or "Ready"
        text = Text("[ ] sections  j/k forms  ↑/↓ questions  a add  e edit  l link  Ctrl+E export\n", style="dim")
        text.append(status, style="white")
        bar.update(text)
