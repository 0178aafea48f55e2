import sys
from pathlib import Path

import pytest

# Add the repository root to sys.path so we can import order_forms
ROOT_PATH = Path(__file__).resolve().parent.parent
if ROOT_PATH.as_posix() not in sys.path:
    sys.path.insert(0, ROOT_PATH.as_posix())

from order_forms.data import initial_state  # noqa: E402
from order_forms.models import EditorState, Form, Question, Section  # noqa: E402
from order_forms.store import FormStore  # noqa: E402


@pytest.fixture
def seed_state() -> EditorState:
    """Fresh copy of the default editor state."""
    return initial_state()


@pytest.fixture
def store(seed_state) -> FormStore:
    return FormStore(seed_state)


@pytest.fixture
def pizza_form() -> Form:
    """Form from the CSV example: one linked question, no global link."""
    return Form(
        id="pizza",
        name="Menu Pizza",
        type="nourriture",
        main_question=Question(input="0", text_fr="Bonjour"),
        questions=[Question(input="1", text_fr="Pizza", price="9.50", linked_form="menu2")],
    )


@pytest.fixture
def small_state(pizza_form) -> EditorState:
    """Two sections, the first one deletable."""
    return EditorState(
        sections=[
            Section(id="extra", name="Extra", forms=[pizza_form]),
            Section(id="menu", name="Menu", forms=[Form(id="menu2", name="Menu 2")], is_default=True),
        ],
        current_section_id="extra",
        current_form_id="pizza",
    )


@pytest.fixture
def db_path(tmp_path: Path, monkeypatch) -> Path:
    """Point persistence at a throwaway database."""
    path = tmp_path / "state.db"
    monkeypatch.setenv("ORDER_FORMS_DB_PATH", path.as_posix())
    return path
