"""
Unit Tests for export validation.
"""

from order_forms.constant import UNNAMED_FORM_LABEL
from order_forms.models import Form, Question, Section
from order_forms.validation import validate_sections


def _welcome(company_name):
    return Form(
        id="accueil",
        name="Bienvenue",
        type="accueil",
        company_name=company_name,
        main_question=Question(input="0", text_fr="Bonjour"),
        questions=[Question(input="1", text_fr="Commander")],
    )


class TestValidateSections:
    """Tests for validate_sections."""

    def test_seed_state_is_valid(self, seed_state):
        result = validate_sections(seed_state.sections)
        assert result.ok
        assert result.company_name == "[Nom de l'entreprise]"

    def test_welcome_form_needs_company_name(self):
        result = validate_sections([Section(id="s", name="S", forms=[_welcome("")])])
        assert not result.ok
        assert any("company name" in error for error in result.errors)
        assert result.company_name is None

    def test_blank_company_name_counts_as_missing(self):
        result = validate_sections([Section(id="s", name="S", forms=[_welcome("   ")])])
        assert not result.ok

    def test_company_name_is_only_checked_on_welcome_forms(self):
        form = _welcome(None)
        form.type = "menu"
        assert validate_sections([Section(id="s", name="S", forms=[form])]).ok

    def test_valid_welcome_form(self):
        result = validate_sections([Section(id="s", name="S", forms=[_welcome("Chez Luigi")])])
        assert result.ok
        assert result.errors == []
        assert result.company_name == "Chez Luigi"

    def test_reports_every_violation(self):
        broken = Form(
            id="x",
            name="",
            questions=[Question(input="1"), Question(input="2", text_fr="ok"), Question(input="3")],
        )
        result = validate_sections([Section(id="s", name="S", forms=[_welcome(""), broken])])
        assert len(result.errors) == 4
        assert sum(UNNAMED_FORM_LABEL in error for error in result.errors) == 3
        assert any("question 1" in error for error in result.errors)
        assert any("question 3" in error for error in result.errors)
        assert any("main question" in error for error in result.errors)

    def test_messages_name_the_form(self):
        form = Form(id="x", name="Desserts")
        result = validate_sections([Section(id="s", name="S", forms=[form])])
        assert result.errors == ['Form "Desserts": main question text is required.']
