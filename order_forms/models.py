"""Domain models for order-forms."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal
from uuid import uuid4

MAIN_QUESTION_INPUT = "0"
GLOBAL_LINK_SOURCE = "global"

FormType = Literal[
    "accueil",
    "menu",
    "personnalise",
    "nourriture",
    "supplements",
    "boissons",
    "gratins",
]

FORM_TYPES: tuple[str, ...] = (
    "accueil",
    "menu",
    "personnalise",
    "nourriture",
    "supplements",
    "boissons",
    "gratins",
)
WELCOME_FORM_TYPE = "accueil"
CUSTOM_FORM_TYPE = "personnalise"


@dataclass
class Question:
    """One selectable option of a form, or the form's main prompt.

    ``price``, ``show_price`` and ``linked_form`` are only meaningful for
    regular questions; the main question (``input == "0"``) keeps them unset.
    """

    input: str
    text_fr: str = ""
    price: str | None = None
    show_price: bool = True
    linked_form: str | None = None
    editable: bool = True

    @property
    def is_main(self) -> bool:
        return self.input == MAIN_QUESTION_INPUT


@dataclass
class Form:
    """One order-flow screen.

    ``company_name`` is only meaningful when ``type`` is the welcome type.
    """

    id: str
    name: str = ""
    type: FormType = CUSTOM_FORM_TYPE
    main_question: Question = field(default_factory=lambda: Question(input=MAIN_QUESTION_INPUT))
    questions: list[Question] = field(default_factory=list)
    global_link: str | None = None
    company_name: str | None = None

    @property
    def is_welcome(self) -> bool:
        return self.type == WELCOME_FORM_TYPE


@dataclass
class Section:
    """A named, ordered group of forms shown as one editor tab."""

    id: str
    name: str
    forms: list[Form] = field(default_factory=list)
    is_default: bool = False


@dataclass
class EditorState:
    """Whole editor snapshot: the section tree plus the two cursors."""

    sections: list[Section] = field(default_factory=list)
    current_section_id: str | None = None
    current_form_id: str | None = None


def new_id() -> str:
    return uuid4().hex


def new_form(name: str = "", form_type: FormType = CUSTOM_FORM_TYPE, form_id: str | None = None) -> Form:
    """Create an empty form with its main question and no options."""
    return Form(
        id=form_id or new_id(),
        name=name,
        type=form_type,
        main_question=Question(input=MAIN_QUESTION_INPUT),
        questions=[],
        global_link=None,
    )


def new_question(form: Form, text_fr: str = "") -> Question:
    """Create the next regular question for ``form`` (not yet attached)."""
    return Question(input=str(len(form.questions) + 1), text_fr=text_fr, price="", linked_form=None)


def new_section(name: str, section_id: str | None = None) -> Section:
    """Create a user section; only seeded sections are default."""
    return Section(id=section_id or new_id(), name=name, forms=[], is_default=False)
