"""
Селекторы данных: JSON-диалект и CSS для узлов дерева.

Основная точка входа: ``select(data, expression)``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Optional

from .evaluator import SelectorEvaluator
from .json_engine import SelectorEvaluationError
from .model import Expression
from .parser import SelectorParser, SelectorSyntaxError
from .result import Location, Match, ResultSet


@lru_cache(maxsize=1024)
def parse_selector(expression: str) -> Expression:
    """Разбирает селектор (результат кешируется по тексту)."""
    return SelectorParser().parse(expression)


def select(
    data: Any,
    expression: str,
    *,
    root: Optional[Any] = None,
    self_match: bool = False,
    location: Optional[Location] = None,
) -> ResultSet:
    """
    Выполняет селектор над значением.

    Args:
        data: значение, от которого ведётся выборка (dict/list/скаляр или узел bs4)
        expression: текст селектора
        root: глобальный корень для ``:root`` (значение или ``Location``);
              по умолчанию вершина цепочки ``location`` или само ``data``
        self_match: значение ``data`` само может попасть в результат
        location: позиция ``data`` в исходных данных (ключ, родитель)

    Raises:
        SelectorSyntaxError: некорректный синтаксис
        SelectorEvaluationError: селектор неприменим к данным
    """
    ast = parse_selector(expression.strip())
    base = location if location is not None and location.value is data else Location(value=data)
    evaluator = SelectorEvaluator(base, root=root, self_match=self_match, selector=expression)
    return evaluator.evaluate(ast)


__all__ = [
    "select",
    "parse_selector",
    "Location",
    "Match",
    "ResultSet",
    "SelectorSyntaxError",
    "SelectorEvaluationError",
]
