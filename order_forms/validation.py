"""Checks run over the whole form tree before export."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from order_forms.constant import UNNAMED_FORM_LABEL
from order_forms.links import all_forms
from order_forms.models import Section


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation pass.

    ``company_name`` is only filled in when there are no errors.
    """

    errors: list[str] = field(default_factory=list)
    company_name: str | None = None

    @property
    def ok(self) -> bool:
        return not self.errors


def _is_blank(value: str | None) -> bool:
    return not (value or "").strip()


def display_form_name(name: str) -> str:
    return name or UNNAMED_FORM_LABEL


def validate_sections(sections: Iterable[Section]) -> ValidationResult:
    """Collect every violation in the tree instead of stopping at the first."""
    errors: list[str] = []
    company_name: str | None = None

    for form in all_forms(sections):
        label = display_form_name(form.name)
        if form.is_welcome:
            if _is_blank(form.company_name):
                errors.append(f'Form "{label}": company name is required.')
            elif company_name is None:
                company_name = form.company_name

        if _is_blank(form.main_question.text_fr):
            errors.append(f'Form "{label}": main question text is required.')

        for question in form.questions:
            if _is_blank(question.text_fr):
                errors.append(f'Form "{label}": question {question.input} text is required.')

    if errors:
        return ValidationResult(errors=errors, company_name=None)
    return ValidationResult(errors=[], company_name=company_name)
