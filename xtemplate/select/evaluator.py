"""
Вычислитель селекторных выражений.

Логический уровень (and/or/not/группы) общий для всех данных,
списки селекторов передаются движку по типу значения области видимости:
узлы дерева в ``DomEngine``, остальное в ``JsonEngine``.
"""

from __future__ import annotations

from typing import Any, List, Optional, cast

from ..dom.nodes import is_tree_node
from .dom_engine import DomEngine
from .json_engine import JsonEngine, SelectorEvaluationError, never_matches
from .model import (
    BinaryExpression,
    Expression,
    ExpressionType,
    GroupExpression,
    NotExpression,
    SelectorList,
)
from .result import Location, Match, ResultSet


class SelectorEvaluator:
    """
    Вычисляет AST селектора относительно базовой позиции.

    Args:
        base: позиция значения, от которого ведётся выборка
        root: глобальный корень (значение или позиция) для ``:root``
        self_match: разрешить совпадение с самим базовым значением
    """

    def __init__(self, base: Location, root: Optional[Any] = None, self_match: bool = False, selector: str = ""):
        self.base = base
        self.self_match = self_match
        self.selector = selector
        self._root = root

    def evaluate(self, expression: Expression) -> ResultSet:
        """
        Raises:
            SelectorEvaluationError: селектор неприменим к данным
            SelectorSyntaxError: CSS-движок отверг селектор
        """
        expression_type = expression.get_type()

        if expression_type == ExpressionType.SELECTORS:
            return self._evaluate_selectors(cast(SelectorList, expression))
        elif expression_type == ExpressionType.GROUP:
            return self.evaluate(cast(GroupExpression, expression).expression)
        elif expression_type == ExpressionType.NOT:
            return self._evaluate_not(cast(NotExpression, expression))
        elif expression_type == ExpressionType.AND:
            return self._evaluate_and(cast(BinaryExpression, expression))
        elif expression_type == ExpressionType.OR:
            return self._evaluate_or(cast(BinaryExpression, expression))
        else:
            raise SelectorEvaluationError(f"Unknown expression type: {expression_type}")

    def _evaluate_selectors(self, expression: SelectorList) -> ResultSet:
        matches: List[Match]
        if is_tree_node(self.base.value):
            root = self._root.value if isinstance(self._root, Location) else self._root
            if root is not None and not is_tree_node(root):
                root = None
            matches = DomEngine(root).select(expression.selectors, self.base, self.self_match)
        else:
            matches = JsonEngine(self._root_location()).select(expression.selectors, self.base, self.self_match)
        return ResultSet(matches, self.selector)

    def _root_location(self) -> Location:
        if isinstance(self._root, Location):
            return self._root
        if self._root is None:
            # корень цепочки позиций базового значения
            top = self.base
            while top.parent is not None:
                top = top.parent
            return top
        return Location(value=self._root)

    def _evaluate_not(self, expression: NotExpression) -> ResultSet:
        """Непусто (значение области видимости), только если операнд пуст."""
        if len(self.evaluate(expression.expression)) > 0:
            return ResultSet.empty(self.selector)
        if never_matches(self.base.value):
            return ResultSet.empty(self.selector)
        return ResultSet([Match(self.base.value, self.base)], self.selector)

    def _evaluate_and(self, expression: BinaryExpression) -> ResultSet:
        """Объединение, если оба операнда непусты; иначе пусто."""
        left = self.evaluate(expression.left)
        if len(left) == 0:
            return ResultSet.empty(self.selector)
        right = self.evaluate(expression.right)
        if len(right) == 0:
            return ResultSet.empty(self.selector)
        return left.union(right)

    def _evaluate_or(self, expression: BinaryExpression) -> ResultSet:
        return self.evaluate(expression.left).union(self.evaluate(expression.right))


__all__ = ["SelectorEvaluator"]
