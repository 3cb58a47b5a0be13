"""
Tests for the selector parser.
"""

import pytest

from xtemplate.select.model import (
    BinaryExpression,
    ExpressionType,
    GroupExpression,
    NotExpression,
    SelectorList,
)
from xtemplate.select.parser import SelectorParser, SelectorSyntaxError, unquote


class TestSelectorParser:

    def setup_method(self):
        self.parser = SelectorParser()

    def test_empty_selector_error(self):
        with pytest.raises(SelectorSyntaxError, match="Empty selector"):
            self.parser.parse("")

        with pytest.raises(SelectorSyntaxError, match="Empty selector"):
            self.parser.parse("   ")

    def test_simple_key(self):
        result = self.parser.parse(".foo")

        assert isinstance(result, SelectorList)
        assert len(result.selectors) == 1
        complex_ = result.selectors[0]
        assert not complex_.relative
        assert complex_.parts[0][0] is None
        assert complex_.first.keys == ["foo"]

    def test_descendant_and_child_combinators(self):
        result = self.parser.parse(".a .b > .c")

        combinators = [c for c, _ in result.selectors[0].parts]
        assert combinators == [None, " ", ">"]

    def test_relative_selector(self):
        result = self.parser.parse("> .a .b")

        complex_ = result.selectors[0]
        assert complex_.relative
        assert [c.keys for _, c in complex_.parts] == [["a"], ["b"]]

    def test_selector_list(self):
        result = self.parser.parse(".a, > .b")

        assert isinstance(result, SelectorList)
        assert [s.relative for s in result.selectors] == [False, True]

    def test_compound_parts(self):
        result = self.parser.parse("string.name:first-child")

        compound = result.selectors[0].first
        assert compound.type_name == "string"
        assert compound.keys == ["name"]
        assert [p.name for p in compound.pseudos] == ["first-child"]
        assert compound.source == "string.name:first-child"

    def test_quoted_key(self):
        result = self.parser.parse('."a key"')
        assert result.selectors[0].first.keys == ["a key"]

    def test_pseudo_argument(self):
        result = self.parser.parse(".name:contains('x y')")

        pseudo = result.selectors[0].first.pseudos[0]
        assert pseudo.name == "contains"
        assert pseudo.argument == "'x y'"

    def test_and_expression(self):
        result = self.parser.parse(".foo and .bar")

        assert isinstance(result, BinaryExpression)
        assert result.operator == ExpressionType.AND
        assert isinstance(result.left, SelectorList)
        assert isinstance(result.right, SelectorList)

    def test_operator_precedence(self):
        """and binds tighter than or"""
        result = self.parser.parse(".a or .b and .c")

        assert isinstance(result, BinaryExpression)
        assert result.operator == ExpressionType.OR
        assert isinstance(result.right, BinaryExpression)
        assert result.right.operator == ExpressionType.AND

    def test_not_expression(self):
        result = self.parser.parse("not .a")

        assert isinstance(result, NotExpression)
        assert isinstance(result.expression, SelectorList)

    def test_grouping(self):
        result = self.parser.parse("(.a or .b) and .c")

        assert isinstance(result, BinaryExpression)
        assert isinstance(result.left, GroupExpression)

    def test_string_round_trip(self):
        assert str(self.parser.parse(".a > .b, > .c")) == ".a > .b, > .c"
        assert str(self.parser.parse("not (.a or .b)")) == "not (.a or .b)"

    def test_dangling_combinator(self):
        with pytest.raises(SelectorSyntaxError, match="Expected selector at end of input"):
            self.parser.parse(".a >")

    def test_unclosed_group(self):
        with pytest.raises(SelectorSyntaxError, match="Expected '\\)'"):
            self.parser.parse("(.a")

    def test_unexpected_token(self):
        with pytest.raises(SelectorSyntaxError, match="Unexpected token '\\)'"):
            self.parser.parse(".a )")

    def test_keyword_without_operand(self):
        with pytest.raises(SelectorSyntaxError):
            self.parser.parse("and")

    def test_lexer_errors_become_syntax_errors(self):
        with pytest.raises(SelectorSyntaxError):
            self.parser.parse(".a @ .b")

    def test_syntax_error_is_value_error(self):
        assert issubclass(SelectorSyntaxError, ValueError)


def test_unquote():
    assert unquote("'a b'") == "a b"
    assert unquote('"say \\"hi\\""') == 'say "hi"'
    assert unquote(" plain ") == "plain"
