"""Rendering and link-label helpers."""

from __future__ import annotations

from typing import Iterable

from rich.text import Text

from order_forms.constant import FORM_TYPE_LABELS, NOT_LINKED_LABEL, UNKNOWN_FORM_LABEL
from order_forms.links import resolve_form_name
from order_forms.models import Form, Question, Section
from order_forms.validation import display_form_name


def badge_style(form_type: str) -> str:
    """Return a consistent badge style for form types."""
    if form_type == "accueil":
        return "bold #ffffff on #b23a48"
    if form_type == "menu":
        return "bold #ffffff on #2f6db5"
    if form_type == "personnalise":
        return "bold #0b1f0f on #d9c36a"
    return "bold #0b1f0f on #5fbf72"


def format_form_label(form: Form) -> Text:
    """Render a form name with its colored type tag."""
    text = Text()
    text.append(FORM_TYPE_LABELS.get(form.type, form.type), style=badge_style(form.type))
    text.append(f" {display_form_name(form.name)}")
    return text


def format_link_label(sections: Iterable[Section], form_id: str | None) -> Text:
    label = resolve_form_name(sections, form_id)
    if label == NOT_LINKED_LABEL:
        return Text(label, style="dim")
    if label == UNKNOWN_FORM_LABEL:
        return Text(f"{label} ({form_id})", style="bold #ffb3b3")
    return Text(f"→ {label}", style="bold")


def format_question_line(question: Question, sections: Iterable[Section]) -> Text:
    """Render one regular question: number, text, price and link."""
    text = Text()
    text.append(f"{question.input}. ", style="bold")
    text.append(question.text_fr or "(empty)", style="white" if question.text_fr else "dim")
    if question.price:
        price_style = "white" if question.show_price else "dim strike"
        text.append(f"  {question.price}", style=price_style)
    text.append("  ")
    text.append_text(format_link_label(sections, question.linked_form))
    return text
