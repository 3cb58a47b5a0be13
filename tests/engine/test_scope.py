"""
Тесты областей видимости: кеширование выборок и переменные.
"""

import logging

from xtemplate.engine.diagnostics import SELECTOR, VARIABLE, Diagnostics
from xtemplate.engine.scope import Scope
from xtemplate.select import select

DATA = {"items": [{"name": "a"}, {"name": "b"}], "title": "T"}


def make_scope(data=DATA):
    return Scope(data, diagnostics=Diagnostics())


class TestMemoization:

    def test_same_expression_returns_same_result(self):
        scope = make_scope()
        first = scope.resolve(".name")
        assert scope.resolve(" .name ") is first
        assert first.values() == ["a", "b"]

    def test_self_flag_is_part_of_key(self):
        scope = make_scope({"name": "x"})
        assert scope.resolve("object").values() == []
        assert scope.resolve("object", self_match=True).values() == [{"name": "x"}]

    def test_invalid_selector_is_reported_once(self, caplog):
        scope = make_scope()
        with caplog.at_level(logging.ERROR):
            first = scope.resolve(".name >")
            second = scope.resolve(".name >")

        assert len(first) == 0
        assert second is first
        assert [p.kind for p in scope.diagnostics.problems] == [SELECTOR]
        assert "Invalid selector '.name >'" in caplog.text

    def test_inapplicable_selector_is_empty(self):
        scope = make_scope()
        assert len(scope.resolve("#id")) == 0
        assert scope.diagnostics.problems[0].kind == SELECTOR

    def test_empty_expression(self):
        scope = make_scope()
        assert len(scope.resolve("")) == 0
        assert len(scope.resolve(None)) == 0
        assert scope.diagnostics.problems == []


class TestVariables:

    def test_assignment_and_reference(self):
        scope = make_scope()
        assigned = scope.resolve("$t=.title")
        assert assigned.values() == ["T"]
        assert scope.resolve("$t") is assigned

    def test_lookup_walks_up(self):
        scope = make_scope()
        assigned = scope.resolve("$t = .title")
        child = scope.child(DATA["items"][0]).child("a")
        assert child.resolve("$t") is assigned

    def test_siblings_do_not_see_each_other(self):
        scope = make_scope()
        left = scope.child(DATA["items"][0])
        right = scope.child(DATA["items"][1])
        left.resolve("$n=.name")

        assert len(right.resolve("$n")) == 0
        assert right.diagnostics.problems[-1].kind == VARIABLE

    def test_missing_variable_logs_error(self, caplog):
        scope = make_scope()
        with caplog.at_level(logging.ERROR):
            result = scope.resolve("$nope")

        assert len(result) == 0
        assert "No value found for variable '$nope'" in caplog.text

    def test_reassignment_warns_and_last_wins(self, caplog):
        scope = make_scope()
        scope.resolve("$v=.title")
        with caplog.at_level(logging.WARNING):
            second = scope.resolve("$v=.name")

        assert scope.lookup("$v") is second
        assert "assigned twice" in caplog.text
        assert scope.diagnostics.problems[0].kind == VARIABLE

    def test_child_variable_shadows_parent(self):
        scope = make_scope()
        scope.resolve("$v=.title")
        child = scope.child(DATA["items"][0])
        inner = child.resolve("$v=.name")
        assert child.resolve("$v") is inner
        assert scope.resolve("$v").values() == ["T"]


class TestContext:

    def test_child_scope_keeps_location(self):
        scope = make_scope()
        match = select(DATA, ".items")[1]
        child = scope.child(match.value, match.location)

        assert child.path == "$.items[1]"
        assert child.resolve(".name").values() == ["b"]

    def test_root_is_shared(self):
        scope = make_scope()
        match = select(DATA, ".items")[0]
        child = scope.child(match.value, match.location)

        assert child.root is scope.root
        assert child.resolve(":root > .title").values() == ["T"]

    def test_foreign_location_is_ignored(self):
        scope = make_scope()
        match = select(DATA, ".items")[0]
        child = scope.child("other", match.location)
        assert child.context.value == "other"
