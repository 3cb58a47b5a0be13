"""
Области видимости данных.

Scope связывает значение данных с узлом шаблона. Новая область создаётся
только директивой повторения (одна на каждое значение), поэтому цепочка
``parent`` повторяет вложенность выходного дерева.

Переменные ``$name`` ищутся вверх по цепочке, наружу; в дочерние и
соседние области поиск не спускается.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional, Tuple

from ..select import Location, ResultSet, SelectorEvaluationError, SelectorSyntaxError, select
from .diagnostics import SELECTOR, VARIABLE, Diagnostics

# $name (ссылка) или $name=selector (присваивание)
_VARIABLE_RE = re.compile(r'^\s*\$([^=]*)(=?)(.*)$', re.DOTALL)


class Scope:
    """
    Уровень привязки данных.

    Attributes:
        object: связанное значение
        context: позиция значения в данных (ключ, индекс, родитель)
        parent: объемлющая область (для поиска переменных)
        variables: таблица переменных ``$name`` → ResultSet
    """

    def __init__(
        self,
        object: Any,
        context: Optional[Location] = None,
        parent: Optional["Scope"] = None,
        *,
        root: Optional[Location] = None,
        diagnostics: Optional[Diagnostics] = None,
    ):
        self.object = object
        self.context = context if context is not None and context.value is object else Location(value=object)
        self.parent = parent
        self.root = root if root is not None else self.context
        self.diagnostics = diagnostics or Diagnostics()
        self.variables: Dict[str, ResultSet] = {}
        self._memo: Dict[Tuple[str, bool], ResultSet] = {}

    def child(self, value: Any, context: Optional[Location] = None) -> "Scope":
        """Дочерняя область для значения, найденного в этой области."""
        return Scope(value, context, self, root=self.root, diagnostics=self.diagnostics)

    def resolve(self, expression: Optional[str], *, self_match: bool = False) -> ResultSet:
        """
        Вычисляет выражение директивы.

        Грамматика: ``selector`` | ``$name`` | ``$name=selector``.
        Селекторы кешируются по точной строке (и флагу ``self``):
        повторный вызов возвращает тот же экземпляр ResultSet.
        """
        expr = (expression or "").strip()
        m = _VARIABLE_RE.match(expr)

        if m is None:
            key = (expr, self_match)
            cached = self._memo.get(key)
            if cached is not None:
                return cached
            result = self._evaluate(expr, self_match)
            self._memo[key] = result
            return result

        name = "$" + m.group(1).strip()

        if m.group(2):
            if name in self.variables:
                self.diagnostics.warning(
                    VARIABLE,
                    f"Variable '{name}' assigned twice in the same scope, last assignment wins",
                    path=self.path,
                )
            result = self._evaluate(m.group(3).strip(), self_match)
            self.variables[name] = result
            return result

        found = self.lookup(name)
        if found is None:
            self.diagnostics.error(VARIABLE, f"No value found for variable '{name}'", path=self.path)
            return ResultSet.empty(expr)
        return found

    def lookup(self, name: str) -> Optional[ResultSet]:
        """Ищет переменную в этой области и далее вверх по ``parent``."""
        scope: Optional[Scope] = self
        while scope is not None:
            value = scope.variables.get(name)
            if value is not None:
                return value
            scope = scope.parent
        return None

    @property
    def path(self) -> str:
        return self.context.describe()

    def _evaluate(self, expr: str, self_match: bool) -> ResultSet:
        if not expr:
            return ResultSet.empty(expr)
        try:
            return select(self.object, expr, root=self.root, self_match=self_match, location=self.context)
        except (SelectorSyntaxError, SelectorEvaluationError) as e:
            self.diagnostics.error(SELECTOR, f"Invalid selector '{expr}': {e}", path=self.path)
        except Exception as e:
            self.diagnostics.error(SELECTOR, f"Selector '{expr}' failed: {e}", path=self.path, exc_info=True)
        return ResultSet.empty(expr)

    def __repr__(self) -> str:
        return f"Scope({self.path})"


__all__ = ["Scope"]
