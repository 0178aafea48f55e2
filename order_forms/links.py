"""Form-id resolution across the whole section tree."""

from __future__ import annotations

from typing import Iterable, Iterator

from order_forms.constant import NOT_LINKED_LABEL, UNKNOWN_FORM_LABEL
from order_forms.models import Form, Section


def all_forms(sections: Iterable[Section]) -> Iterator[Form]:
    """Yield every form in section order, then form order."""
    for section in sections:
        yield from section.forms


def find_form(sections: Iterable[Section], form_id: str | None) -> Form | None:
    if not form_id:
        return None
    return next((form for form in all_forms(sections) if form.id == form_id), None)


def find_section_of(sections: Iterable[Section], form_id: str) -> Section | None:
    """Return the section that currently owns ``form_id``."""
    for section in sections:
        if any(form.id == form_id for form in section.forms):
            return section
    return None


def resolve_form_name(sections: Iterable[Section], form_id: str | None) -> str:
    """Translate a link reference into a display label.

    Links are weak references: a reference to a deleted form resolves to the
    unknown-form label instead of failing.
    """
    if not form_id:
        return NOT_LINKED_LABEL
    form = find_form(sections, form_id)
    if form is None:
        return UNKNOWN_FORM_LABEL
    return form.name


def link_targets(sections: Iterable[Section], exclude_form_id: str | None = None) -> list[tuple[Section, Form]]:
    """List candidate link targets grouped by section, optionally hiding one form."""
    return [
        (section, form)
        for section in sections
        for form in section.forms
        if form.id != exclude_form_id
    ]
