"""
Headless tests for the Textual editor.
"""

import asyncio

from order_forms.editor_app import OrderFormsApp
from order_forms.store import FormStore


def _run(app: OrderFormsApp, *keys: str) -> None:
    async def scenario() -> None:
        async with app.run_test() as pilot:
            for key in keys:
                await pilot.press(key)
            await pilot.pause()

    asyncio.run(scenario())


class TestEditorApp:
    """Drive the editor with key presses and inspect the store."""

    def test_add_then_remove_question(self, seed_state):
        app = OrderFormsApp(store=FormStore(seed_state), persist=False)
        _run(app, "a", "a", "d")
        assert [q.input for q in app.store.current_form.questions] == ["1", "2", "3", "4"]

    def test_edit_main_question_text(self, seed_state):
        app = OrderFormsApp(store=FormStore(seed_state), persist=False)
        _run(app, "e", *["backspace"] * 60, "s", "a", "l", "u", "t", "enter")
        assert app.store.current_form.main_question.text_fr == "salut"

    def test_default_section_is_not_deleted(self, seed_state):
        app = OrderFormsApp(store=FormStore(seed_state), persist=False)
        _run(app, "ctrl+d")
        assert len(app.store.state.sections) == len(seed_state.sections)
        assert app.system_status == "Default sections cannot be deleted"

    def test_export_writes_bundle(self, seed_state, tmp_path):
        app = OrderFormsApp(store=FormStore(seed_state), persist=False, output_dir=tmp_path.as_posix())
        _run(app, "ctrl+e")
        assert [p.name for p in tmp_path.iterdir()] == ["[nom_de_l'entreprise].zip"]
        assert app.system_status.startswith("Exported:")

    def test_export_blocked_by_validation(self, seed_state, tmp_path):
        app = OrderFormsApp(store=FormStore(seed_state), persist=False, output_dir=tmp_path.as_posix())
        _run(app, "a", "ctrl+e")
        assert list(tmp_path.iterdir()) == []
        assert app.system_status.startswith("Export blocked (1 problems)")

    def test_switch_section_selects_first_form(self, seed_state):
        app = OrderFormsApp(store=FormStore(seed_state), persist=False)
        _run(app, "right_square_bracket")
        assert app.store.state.current_section_id == "menu"
        assert app.store.state.current_form_id == "menu"
