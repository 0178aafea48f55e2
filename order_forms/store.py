"""State container that applies mutations and notifies observers."""

from __future__ import annotations

import logging
from typing import Callable

from order_forms import mutations
from order_forms.data import initial_state
from order_forms.models import EditorState, Form, Section

logger = logging.getLogger(__name__)

StateListener = Callable[[EditorState], None]


class FormStore:
    """Holds the current editor snapshot.

    Each mutation replaces the snapshot wholesale and then calls every
    subscribed listener with the new state; the persistence hook is one such
    listener.
    """

    def __init__(self, state: EditorState | None = None) -> None:
        self.state = state if state is not None else initial_state()
        self.pending_link_source: str | None = None
        self._listeners: list[StateListener] = []

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _apply(self, new_state: EditorState, reselect: bool = True) -> EditorState:
        if reselect:
            new_state = mutations.auto_select(new_state)
        self.state = new_state
        for listener in list(self._listeners):
            listener(new_state)
        return new_state

    # Read helpers

    @property
    def current_section(self) -> Section | None:
        return mutations.current_section(self.state)

    @property
    def current_form(self) -> Form | None:
        return mutations.current_form(self.state)

    # Sections

    def add_section(self, section: Section) -> EditorState:
        return self._apply(mutations.add_section(self.state, section))

    def update_section(self, section: Section) -> EditorState:
        return self._apply(mutations.update_section(self.state, section))

    def delete_section(self, section_id: str) -> EditorState:
        return self._apply(mutations.delete_section(self.state, section_id))

    def reorder_sections(self, source_index: int, destination_index: int) -> EditorState:
        return self._apply(mutations.reorder_sections(self.state, source_index, destination_index))

    # Forms

    def add_form(self, section_id: str, form: Form) -> EditorState:
        return self._apply(mutations.add_form(self.state, section_id, form))

    def update_form(self, form: Form) -> EditorState:
        return self._apply(mutations.update_form(self.state, form))

    def delete_form(self, form_id: str) -> EditorState:
        return self._apply(mutations.delete_form(self.state, form_id))

    # Cursors

    def set_current_section(self, section_id: str | None) -> EditorState:
        return self._apply(mutations.set_current_section(self.state, section_id), reselect=False)

    def set_current_form(self, form_id: str | None) -> EditorState:
        return self._apply(mutations.set_current_form(self.state, form_id), reselect=False)

    # Questions

    def add_question(self, text_fr: str = "") -> EditorState:
        return self._apply(mutations.add_question(self.state, text_fr))

    def update_question(self, question_input: str, **fields: object) -> EditorState:
        return self._apply(mutations.update_question(self.state, question_input, **fields))

    def remove_question(self, question_input: str) -> EditorState:
        return self._apply(mutations.remove_question(self.state, question_input))

    # Linking

    def begin_link(self, source: str) -> None:
        """Remember what the next ``link_forms`` call should link."""
        self.pending_link_source = source

    def cancel_link(self) -> None:
        self.pending_link_source = None

    def link_forms(self, target_form_id: str | None) -> EditorState:
        source = self.pending_link_source
        if source is None:
            return self.state
        self.pending_link_source = None
        logger.debug("linking %s of form %s to %s", source, self.state.current_form_id, target_form_id)
        return self._apply(mutations.link_forms(self.state, source, target_form_id))

    def reset(self) -> EditorState:
        """Drop every edit and go back to the seed state."""
        self.pending_link_source = None
        return self._apply(initial_state())
