"""
Unit Tests for link resolution.
"""

from order_forms.constant import NOT_LINKED_LABEL, UNKNOWN_FORM_LABEL
from order_forms.links import all_forms, find_form, find_section_of, link_targets, resolve_form_name


class TestResolveFormName:
    """Tests for resolve_form_name over its three input partitions."""

    def test_missing_reference(self, small_state):
        assert resolve_form_name(small_state.sections, None) == NOT_LINKED_LABEL
        assert resolve_form_name(small_state.sections, "") == NOT_LINKED_LABEL

    def test_every_present_id_resolves_to_its_name(self, seed_state):
        for form in all_forms(seed_state.sections):
            assert resolve_form_name(seed_state.sections, form.id) == form.name

    def test_resolution_crosses_sections(self, small_state):
        assert resolve_form_name(small_state.sections, "menu2") == "Menu 2"

    def test_absent_id(self, small_state):
        assert resolve_form_name(small_state.sections, "deleted-form") == UNKNOWN_FORM_LABEL


class TestLookups:
    """Tests for the lookup helpers."""

    def test_all_forms_in_tree_order(self, small_state):
        assert [form.id for form in all_forms(small_state.sections)] == ["pizza", "menu2"]

    def test_find_form(self, small_state):
        assert find_form(small_state.sections, "menu2").name == "Menu 2"
        assert find_form(small_state.sections, "nope") is None
        assert find_form(small_state.sections, None) is None

    def test_find_section_of(self, small_state):
        assert find_section_of(small_state.sections, "menu2").id == "menu"
        assert find_section_of(small_state.sections, "nope") is None

    def test_link_targets_can_exclude_current_form(self, small_state):
        targets = link_targets(small_state.sections, exclude_form_id="pizza")
        assert [(section.id, form.id) for section, form in targets] == [("menu", "menu2")]
