"""
Unit Tests for CSV generation and bundling.
"""

import io
import zipfile

import pytest

from order_forms.constant import DEFAULT_BUNDLE_NAME
from order_forms.export import (
    ExportValidationError,
    build_archive,
    bundle_files,
    bundle_name,
    csv_filename,
    export_bundle,
    form_to_csv,
)
from order_forms.models import Form, Question, Section


class TestFormToCsv:
    """Tests for form_to_csv."""

    def test_reference_form(self, pizza_form):
        assert form_to_csv(pizza_form) == "input,output,text_fr,price\n0,,Bonjour,\n1,menu2,Pizza,9.50"

    def test_global_link_fills_unlinked_questions(self, pizza_form):
        pizza_form.global_link = "drinks"
        pizza_form.questions.append(Question(input="2", text_fr="Calzone", price=""))
        lines = form_to_csv(pizza_form).split("\n")
        assert lines[2] == "1,menu2,Pizza,9.50"
        assert lines[3] == "2,drinks,Calzone,"

    def test_no_link_and_no_price(self):
        form = Form(id="f", main_question=Question(input="0", text_fr="Q"), questions=[Question(input="1", text_fr="A")])
        assert form_to_csv(form).split("\n")[-1] == "1,,A,"

    def test_hidden_price_is_not_emitted(self, pizza_form):
        pizza_form.questions[0].show_price = False
        assert form_to_csv(pizza_form).split("\n")[-1] == "1,menu2,Pizza,"

    def test_dangling_link_is_written_as_is(self, pizza_form):
        pizza_form.questions[0].linked_form = "deleted-form"
        assert form_to_csv(pizza_form).split("\n")[-1] == "1,deleted-form,Pizza,9.50"

    def test_commas_are_not_escaped(self, pizza_form, caplog):
        pizza_form.questions[0].text_fr = "Pizza, grande"
        with caplog.at_level("WARNING", logger="order_forms.export"):
            csv_text = form_to_csv(pizza_form)
        assert csv_text.split("\n")[-1] == "1,menu2,Pizza, grande,9.50"
        assert "cannot parse back" in caplog.text


class TestNaming:
    """Tests for filename and bundle naming."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Menu Pizza", "menu_pizza.csv"),
            ("Message   de\tbienvenue", "message_de_bienvenue.csv"),
            ("", "unnamed_form.csv"),
        ],
    )
    def test_csv_filename(self, name, expected):
        assert csv_filename(Form(id="x", name=name)) == expected

    def test_bundle_name(self):
        assert bundle_name("Chez Luigi") == "chez_luigi"
        assert bundle_name(None) == DEFAULT_BUNDLE_NAME
        assert bundle_name("  ") == DEFAULT_BUNDLE_NAME
        assert bundle_name("Pizza/Pasta") == "pizza_pasta"

    @pytest.mark.parametrize("company", ["..", ".", " . ", "/", "../.."])
    def test_bundle_name_never_escapes_the_archive(self, company):
        assert bundle_name(company) == DEFAULT_BUNDLE_NAME
        names = zipfile.ZipFile(io.BytesIO(build_archive({"a.csv": "x"}, folder=bundle_name(company)))).namelist()
        assert names == [f"{DEFAULT_BUNDLE_NAME}/a.csv"]

    def test_bundle_name_drops_leading_dots(self):
        assert bundle_name("..Chez Luigi") == "chez_luigi"


class TestBundle:
    """Tests for bundle_files and build_archive."""

    def test_one_file_per_form(self, seed_state):
        files = bundle_files(seed_state.sections)
        assert list(files) == ["message_de_bienvenue.csv", "menu.csv"]
        assert files["menu.csv"].startswith("input,output,text_fr,price\n0,,Que voulez-vous commander ?,")

    def test_duplicate_names_keep_last(self):
        first = Form(id="a", name="Menu", main_question=Question(input="0", text_fr="first"))
        second = Form(id="b", name="menu", main_question=Question(input="0", text_fr="second"))
        files = bundle_files([Section(id="s", name="S", forms=[first, second])])
        assert list(files) == ["menu.csv"]
        assert "second" in files["menu.csv"]

    def test_archive_nests_files_in_folder(self):
        payload = build_archive({"a.csv": "x", "b.csv": "y"}, folder="chez_luigi")
        with zipfile.ZipFile(io.BytesIO(payload)) as archive:
            assert sorted(archive.namelist()) == ["chez_luigi/a.csv", "chez_luigi/b.csv"]
            assert archive.read("chez_luigi/b.csv") == b"y"

    def test_archive_without_folder(self):
        payload = build_archive({"a.csv": "x"})
        with zipfile.ZipFile(io.BytesIO(payload)) as archive:
            assert archive.namelist() == ["a.csv"]


class TestExportBundle:
    """Tests for export_bundle."""

    def test_writes_archive_named_after_company(self, seed_state, tmp_path):
        welcome = seed_state.sections[0].forms[0]
        welcome.company_name = "Chez Luigi"
        target = export_bundle(seed_state.sections, tmp_path)
        assert target == tmp_path / "chez_luigi.zip"
        with zipfile.ZipFile(target) as archive:
            assert sorted(archive.namelist()) == ["chez_luigi/menu.csv", "chez_luigi/message_de_bienvenue.csv"]
        assert [p.name for p in tmp_path.iterdir()] == ["chez_luigi.zip"]

    def test_without_welcome_form_uses_default_name(self, small_state, tmp_path):
        small_state.sections[1].forms[0].main_question.text_fr = "Menu"
        target = export_bundle(small_state.sections, tmp_path, nest_in_folder=False)
        assert target.name == f"{DEFAULT_BUNDLE_NAME}.zip"
        with zipfile.ZipFile(target) as archive:
            assert sorted(archive.namelist()) == ["menu_2.csv", "menu_pizza.csv"]

    def test_invalid_tree_writes_nothing(self, seed_state, tmp_path):
        seed_state.sections[0].forms[0].company_name = ""
        with pytest.raises(ExportValidationError) as excinfo:
            export_bundle(seed_state.sections, tmp_path / "out")
        assert excinfo.value.errors
        assert not (tmp_path / "out").exists()

    def test_valid_after_fixing_company_name(self, seed_state, tmp_path):
        seed_state.sections[0].forms[0].company_name = ""
        with pytest.raises(ExportValidationError):
            export_bundle(seed_state.sections, tmp_path)
        seed_state.sections[0].forms[0].company_name = "Luigi"
        assert export_bundle(seed_state.sections, tmp_path).exists()
