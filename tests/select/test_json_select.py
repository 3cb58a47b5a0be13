"""
Selector evaluation over JSON-like data.
"""

import pytest

from xtemplate.select import Location, SelectorEvaluationError, SelectorSyntaxError, select

DATA = {
    "result": [
        {"name": "a", "age": 1},
        {"name": "b", "age": 2},
    ],
    "title": "People",
}


def values(data, expression, **kwargs):
    return select(data, expression, **kwargs).values()


class TestKeysAndCombinators:

    def test_key_matches_at_any_depth(self):
        assert values(DATA, ".name") == ["a", "b"]

    def test_arrays_are_transparent(self):
        assert values(DATA, ".result") == DATA["result"]

    def test_nested_arrays_are_flattened(self):
        data = {"m": [[1, 2], [3]]}
        assert values(data, ".m") == [1, 2, 3]
        assert values([[1], [2]], "number") == [1, 2]
        assert [m.location.describe() for m in select(data, ".m")] == ["$.m[0]", "$.m[1]", "$.m[2]"]

    def test_child_combinator(self):
        assert values(DATA, ".result > .name") == ["a", "b"]
        assert values(DATA, ".title > .name") == []

    def test_descendant_combinator(self):
        nested = {"a": {"b": {"c": 1}}, "c": 2}
        assert values(nested, ".a .c") == [1]

    def test_relative_selector_starts_at_base(self):
        nested = {"a": {"a": 1}}
        assert values(nested, "> .a") == [{"a": 1}]

    def test_document_order(self):
        assert values(DATA, ".age, .name") == ["a", 1, "b", 2]

    def test_star_and_types(self):
        assert values(DATA, "string") == ["a", "b", "People"]
        assert values(DATA, "number") == [1, 2]
        assert values(DATA, ".result > *") == ["a", 1, "b", 2]

    def test_quoted_key(self):
        assert values({"a key": 5}, '."a key"') == [5]


class TestPseudoClasses:

    def test_first_and_last_child(self):
        assert values(DATA, ".result:first-child") == [DATA["result"][0]]
        assert values(DATA, ".result:last-child") == [DATA["result"][1]]

    def test_nth_child(self):
        data = {"n": [10, 20, 30]}
        assert values(data, ".n:nth-child(odd)") == [10, 30]
        assert values(data, ".n:nth-child(even)") == [20]
        assert values(data, ".n:nth-child(2)") == [20]

    def test_only_child(self):
        assert values({"x": {"y": 1}}, ".y:only-child") == [1]

    def test_contains_and_val(self):
        assert values(DATA, ".name:contains('a')") == ["a"]
        assert values(DATA, ".age:val(2)") == [2]

    def test_empty(self):
        data = {"b": {}, "c": "", "d": "x"}
        assert values(data, ":empty") == [{}, ""]

    def test_root(self):
        assert values(DATA, ":root") == [DATA]

    def test_root_anchors_at_global_root(self):
        first = select(DATA, ".result")[0]
        inner = values(first.value, ":root > .title", location=first.location)
        assert inner == ["People"]


class TestLogicalOperators:

    def test_and_requires_both_sides(self):
        assert values(DATA, ".name and .age") == ["a", "b", 1, 2]
        assert values(DATA, ".name and .missing") == []

    def test_or_is_union(self):
        assert values(DATA, ".name or .missing") == ["a", "b"]
        assert values(DATA, ".name or string") == ["a", "b", "People"]

    def test_not_yields_base(self):
        assert values(DATA, "not .missing") == [DATA]
        assert values(DATA, "not .name") == []

    def test_grouping(self):
        assert values(DATA, "(.missing or .title) and .name") == ["People", "a", "b"]


class TestSelfMatch:

    def test_self_match_includes_base(self):
        assert values({"name": "x"}, "object") == []
        assert values({"name": "x"}, "object", self_match=True) == [{"name": "x"}]

    def test_relative_with_self_tests_only_base(self):
        first = select(DATA, ".result")[0]
        assert values(first.value, "> .result", self_match=True, location=first.location) == [first.value]
        assert values(first.value, "> .name", self_match=True, location=first.location) == []


class TestNeverMatching:

    def test_null_and_false_never_match(self):
        data = {"a": None, "b": False, "c": 0, "d": ""}
        assert values(data, ".a") == []
        assert values(data, ".b") == []
        assert values(data, ".c") == [0]
        assert values(data, ".d") == [""]


class TestLocations:

    def test_location_describes_path(self):
        result = select(DATA, ".name")
        assert result[1].location.describe() == "$.result[1].name"
        assert result[1].location.key == "name"

    def test_duplicate_matches_collapse(self):
        assert len(select(DATA, ".name, .result > .name")) == 2

    def test_scalar_base(self):
        assert values(5, ".x") == []
        assert values(5, "number", self_match=True) == [5]

    def test_location_of_base(self):
        base = Location(value={"k": 1})
        result = select(base.value, ".k", location=base)
        assert result[0].location.parent is base


class TestErrors:

    def test_id_selectors_are_rejected(self):
        with pytest.raises(SelectorEvaluationError):
            select(DATA, "#name")

    def test_attribute_selectors_are_rejected(self):
        with pytest.raises(SelectorEvaluationError):
            select(DATA, "[name]")

    def test_sibling_combinators_are_rejected(self):
        with pytest.raises(SelectorEvaluationError):
            select({"a": 1, "b": 2}, ".a + .b")

    def test_unknown_pseudo_class(self):
        with pytest.raises(SelectorEvaluationError, match="Unknown pseudo-class"):
            select(DATA, ".name:hover")

    def test_unknown_type(self):
        with pytest.raises(SelectorEvaluationError, match="Unknown JSON type"):
            select(DATA, "widget")

    def test_syntax_error(self):
        with pytest.raises(SelectorSyntaxError):
            select(DATA, ".name >")
