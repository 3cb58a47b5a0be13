"""
Модели данных для селекторных выражений.

Два уровня: логический (and/or/not/группы) и структурный
(списки селекторов, составные селекторы и комбинаторы).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class ExpressionType(Enum):
    """Типы узлов выражения."""
    SELECTORS = "selectors"
    AND = "and"
    OR = "or"
    NOT = "not"
    GROUP = "group"


@dataclass
class Pseudo:
    """Псевдокласс ``:name`` или ``:name(argument)``."""
    name: str
    argument: Optional[str] = None

    def __str__(self) -> str:
        if self.argument is None:
            return f":{self.name}"
        return f":{self.name}({self.argument})"


@dataclass
class Compound:
    """
    Составной селектор: тип/тег, ключи, псевдоклассы.

    ``source`` хранит исходный текст, он передаётся CSS-движку
    при выборке из дерева разметки.
    """
    source: str
    type_name: Optional[str] = None      # IDENT или "*"
    keys: List[str] = field(default_factory=list)
    ids: List[str] = field(default_factory=list)
    attributes: List[str] = field(default_factory=list)
    pseudos: List[Pseudo] = field(default_factory=list)

    def has_pseudo(self, name: str) -> bool:
        return any(p.name == name for p in self.pseudos)

    def __str__(self) -> str:
        return self.source


# Комбинатор перед составным селектором: None для первого, " ", ">", "+", "~"
ComplexPart = Tuple[Optional[str], Compound]


@dataclass
class Complex:
    """
    Сложный селектор: цепочка составных селекторов через комбинаторы.

    ``relative``: выражение начинается с ``>`` и отсчитывается
    от текущей области видимости.
    """
    parts: List[ComplexPart]
    relative: bool = False

    @property
    def first(self) -> Compound:
        return self.parts[0][1]

    @property
    def anchored_at_root(self) -> bool:
        return self.first.has_pseudo("root")

    def css(self, start: int = 0) -> str:
        """Собирает текст селектора обратно (для CSS-движка), начиная с части ``start``."""
        chunks: List[str] = []
        for combinator, compound in self.parts[start:]:
            if chunks and combinator not in (None, " "):
                chunks.append(combinator)
            chunks.append(compound.source)
        return " ".join(chunks)

    def __str__(self) -> str:
        text = self.css()
        return f"> {text}" if self.relative else text


@dataclass
class Expression(ABC):
    """Базовый абстрактный класс узла выражения."""

    @abstractmethod
    def get_type(self) -> ExpressionType:
        pass

    def __str__(self) -> str:
        return self._to_string()

    @abstractmethod
    def _to_string(self) -> str:
        pass


@dataclass
class SelectorList(Expression):
    """Перечисление селекторов через запятую (объединение результатов)."""
    selectors: List[Complex]

    def get_type(self) -> ExpressionType:
        return ExpressionType.SELECTORS

    def _to_string(self) -> str:
        return ", ".join(str(s) for s in self.selectors)


@dataclass
class GroupExpression(Expression):
    """Выражение в скобках."""
    expression: Expression

    def get_type(self) -> ExpressionType:
        return ExpressionType.GROUP

    def _to_string(self) -> str:
        return f"({self.expression})"


@dataclass
class NotExpression(Expression):
    """
    Отрицание: ``not expr``.

    Непусто (значение области видимости), если вложенное выражение пусто.
    """
    expression: Expression

    def get_type(self) -> ExpressionType:
        return ExpressionType.NOT

    def _to_string(self) -> str:
        return f"not {self.expression}"


@dataclass
class BinaryExpression(Expression):
    """
    Бинарная операция: left op right

    - and: объединение, если оба операнда непусты, иначе пусто
    - or: объединение результатов
    """
    left: Expression
    right: Expression
    operator: ExpressionType  # AND или OR

    def get_type(self) -> ExpressionType:
        return self.operator

    def _to_string(self) -> str:
        op_str = "and" if self.operator == ExpressionType.AND else "or"
        return f"{self.left} {op_str} {self.right}"


__all__ = [
    "ExpressionType",
    "Pseudo",
    "Compound",
    "Complex",
    "Expression",
    "SelectorList",
    "GroupExpression",
    "NotExpression",
    "BinaryExpression",
]
