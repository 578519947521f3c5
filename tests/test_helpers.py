"""Tests for general helpers."""
from custom_components.plexvoice.utils.helpers import build_natural_lang_list, get_nested


class TestBuildNaturalLangList:
    def test_three_items(self):
        assert build_natural_lang_list(["A", "B", "C"], "and") == "A, B and C"

    def test_two_items(self):
        assert build_natural_lang_list(["A", "B"], "or") == "A or B"

    def test_one_item(self):
        assert build_natural_lang_list(["A"], "and") == "A"

    def test_empty(self):
        assert build_natural_lang_list([], "and") == ""

    def test_hyphenize_multi_word_items(self):
        result = build_natural_lang_list(["Doctor Who", "Archer", "The Office US"], "and", hyphenize=True)
        assert result == "Doctor-Who, Archer and The-Office-US"

    def test_does_not_mutate_input(self):
        items = ["Doctor Who"]
        build_natural_lang_list(items, "and", hyphenize=True)
        assert items == ["Doctor Who"]


def test_get_nested():
    data = {"MediaContainer": {"machineIdentifier": "abc", "Metadata": []}}
    assert get_nested(data, "MediaContainer", "machineIdentifier") == "abc"
    assert get_nested(data, "MediaContainer", "missing", default="x") == "x"
    assert get_nested(data, "MediaContainer", "Metadata", default=None) == []
