"""Seed state built from the static configuration."""

from __future__ import annotations

from order_forms.constant import INITIAL_FORM_ID, INITIAL_SECTION_ID, SEED_SECTIONS
from order_forms.models import MAIN_QUESTION_INPUT, EditorState, Form, Question, Section


def _seed_form(raw: dict[str, object]) -> Form:
    questions = [
        Question(
            input=str(idx + 1),
            text_fr=str(item["text_fr"]),
            price=str(item.get("price", "")),
            linked_form=item.get("linked_form"),  # type: ignore[arg-type]
        )
        for idx, item in enumerate(raw.get("questions", []))  # type: ignore[arg-type]
    ]
    return Form(
        id=str(raw["id"]),
        name=str(raw["name"]),
        type=raw["type"],  # type: ignore[arg-type]
        company_name=raw.get("company_name"),  # type: ignore[arg-type]
        main_question=Question(input=MAIN_QUESTION_INPUT, text_fr=str(raw["main_question"])),
        questions=questions,
        global_link=None,
    )


def seed_sections() -> list[Section]:
    """Build a fresh copy of the default sections."""
    return [
        Section(
            id=str(raw["id"]),
            name=str(raw["name"]),
            forms=[_seed_form(form) for form in raw["forms"]],  # type: ignore[attr-defined]
            is_default=True,
        )
        for raw in SEED_SECTIONS
    ]


def initial_state() -> EditorState:
    """State used on first run and after an explicit reset."""
    return EditorState(
        sections=seed_sections(),
        current_section_id=INITIAL_SECTION_ID,
        current_form_id=INITIAL_FORM_ID,
    )
