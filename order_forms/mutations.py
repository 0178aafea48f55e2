"""Pure state transitions for the editor tree.

Every function takes an ``EditorState`` and returns a new one; the input
snapshot is never modified. Requests that target a missing id are no-ops.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import replace

from order_forms.links import find_form, find_section_of
from order_forms.models import (
    GLOBAL_LINK_SOURCE,
    MAIN_QUESTION_INPUT,
    EditorState,
    Form,
    Section,
    new_question,
)


def _clone(state: EditorState) -> EditorState:
    return deepcopy(state)


def _section_by_id(state: EditorState, section_id: str | None) -> Section | None:
    if section_id is None:
        return None
    return next((section for section in state.sections if section.id == section_id), None)


def current_section(state: EditorState) -> Section | None:
    return _section_by_id(state, state.current_section_id)


def current_form(state: EditorState) -> Form | None:
    """Return the current form; form ids are unique across all sections."""
    return find_form(state.sections, state.current_form_id)


# Sections


def add_section(state: EditorState, section: Section) -> EditorState:
    new_state = _clone(state)
    new_state.sections.append(deepcopy(section))
    return new_state


def update_section(state: EditorState, section: Section) -> EditorState:
    """Replace the section with the same id; the default flag is kept."""
    new_state = _clone(state)
    for idx, existing in enumerate(new_state.sections):
        if existing.id == section.id:
            new_state.sections[idx] = replace(deepcopy(section), is_default=existing.is_default)
            break
    return new_state


def delete_section(state: EditorState, section_id: str) -> EditorState:
    target = _section_by_id(state, section_id)
    if target is None or target.is_default:
        return state

    new_state = _clone(state)
    new_state.sections = [section for section in new_state.sections if section.id != section_id]
    if new_state.current_section_id == section_id:
        new_state.current_section_id = new_state.sections[0].id if new_state.sections else None
        new_state.current_form_id = None
    return new_state


def reorder_sections(state: EditorState, source_index: int, destination_index: int) -> EditorState:
    """Move one section to a new position, keeping the others in order."""
    count = len(state.sections)
    if not (0 <= source_index < count and 0 <= destination_index < count):
        return state

    new_state = _clone(state)
    moved = new_state.sections.pop(source_index)
    new_state.sections.insert(destination_index, moved)
    return new_state


# Forms


def add_form(state: EditorState, section_id: str, form: Form) -> EditorState:
    new_state = _clone(state)
    section = _section_by_id(new_state, section_id)
    if section is None:
        return state
    section.forms.append(deepcopy(form))
    new_state.current_form_id = form.id
    return new_state


def update_form(state: EditorState, form: Form) -> EditorState:
    new_state = _clone(state)
    section = find_section_of(new_state.sections, form.id)
    if section is None:
        return state
    for idx, existing in enumerate(section.forms):
        if existing.id == form.id:
            section.forms[idx] = deepcopy(form)
            break
    return new_state


def delete_form(state: EditorState, form_id: str) -> EditorState:
    new_state = _clone(state)
    section = find_section_of(new_state.sections, form_id)
    if section is None:
        return state

    section.forms = [form for form in section.forms if form.id != form_id]
    if new_state.current_form_id == form_id:
        new_state.current_form_id = section.forms[0].id if section.forms else None
    return new_state


# Cursors


def set_current_section(state: EditorState, section_id: str | None) -> EditorState:
    return replace(_clone(state), current_section_id=section_id)


def set_current_form(state: EditorState, form_id: str | None) -> EditorState:
    return replace(_clone(state), current_form_id=form_id)


def auto_select(state: EditorState) -> EditorState:
    """Fill empty cursors with the first section and its first form.

    Existing selections are never overridden, so applying this twice is the
    same as applying it once.
    """
    new_state = state
    if new_state.current_section_id is None and new_state.sections:
        new_state = set_current_section(new_state, new_state.sections[0].id)

    section = current_section(new_state)
    if section is not None and section.forms and new_state.current_form_id is None:
        new_state = set_current_form(new_state, section.forms[0].id)
    return new_state


# Questions (on a single form)


def append_question(form: Form, text_fr: str = "") -> Form:
    updated = deepcopy(form)
    updated.questions.append(new_question(updated, text_fr))
    return updated


def merge_question(form: Form, question_input: str, **fields: object) -> Form:
    """Merge ``fields`` into the question with ``question_input``.

    ``input`` itself is never merged so the numbering invariant holds.
    """
    fields.pop("input", None)
    updated = deepcopy(form)
    if question_input == MAIN_QUESTION_INPUT:
        updated.main_question = replace(updated.main_question, **fields)
        return updated

    updated.questions = [
        replace(question, **fields) if question.input == question_input else question
        for question in updated.questions
    ]
    return updated


def drop_question(form: Form, question_input: str) -> Form:
    """Remove one question and renumber the rest to 1..N."""
    updated = deepcopy(form)
    remaining = [question for question in updated.questions if question.input != question_input]
    updated.questions = [replace(question, input=str(idx + 1)) for idx, question in enumerate(remaining)]
    return updated


def set_link(form: Form, source: str, target_form_id: str | None) -> Form:
    """Point the global link or one question's link at ``target_form_id``."""
    if source == GLOBAL_LINK_SOURCE:
        return replace(deepcopy(form), global_link=target_form_id)
    if source == MAIN_QUESTION_INPUT:
        return form
    return merge_question(form, source, linked_form=target_form_id)


# Questions (on the current form)


def add_question(state: EditorState, text_fr: str = "") -> EditorState:
    form = current_form(state)
    if form is None:
        return state
    return update_form(state, append_question(form, text_fr))


def update_question(state: EditorState, question_input: str, **fields: object) -> EditorState:
    form = current_form(state)
    if form is None:
        return state
    return update_form(state, merge_question(form, question_input, **fields))


def remove_question(state: EditorState, question_input: str) -> EditorState:
    form = current_form(state)
    if form is None or question_input == MAIN_QUESTION_INPUT:
        return state
    return update_form(state, drop_question(form, question_input))


def link_forms(state: EditorState, source: str, target_form_id: str | None) -> EditorState:
    form = current_form(state)
    if form is None:
        return state
    return update_form(state, set_link(form, source, target_form_id))
