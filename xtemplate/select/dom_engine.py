"""
Выборка из дерева разметки через soupsieve.

Текст селектора передаётся CSS-движку почти без изменений:
ведущий ``>`` превращается в ``:scope >``, а селекторы, начинающиеся
с ``:root``, вычисляются от корневого документа.
"""

from __future__ import annotations

from typing import Any, List, Sequence

import soupsieve as sv

from ..dom.nodes import is_element, owner_document
from .model import Complex
from .parser import SelectorSyntaxError
from .result import Location, Match


class DomEngine:
    """
    Args:
        root: узел, от которого отсчитывается ``:root`` (обычно документ шаблона)
    """

    def __init__(self, root: Any = None):
        self.root = root

    def select(self, selectors: Sequence[Complex], base: Location, self_match: bool) -> List[Match]:
        node = base.value
        scoped = [c for c in selectors if not c.anchored_at_root]
        rooted = [c for c in selectors if c.anchored_at_root]

        found: List[Any] = []
        if scoped:
            found.extend(self._select_scoped(scoped, node, self_match))
        if rooted:
            root = self.root if self.root is not None else owner_document(node)
            found.extend(self._run(sv.select, ", ".join(c.css() for c in rooted), root))

        return [Match(n, Location(value=n)) for n in found]

    def _select_scoped(self, selectors: Sequence[Complex], node: Any, self_match: bool) -> List[Any]:
        if not hasattr(node, "select"):
            return []

        if not self_match:
            css = ", ".join(
                f":scope > {c.css()}" if c.relative else c.css()
                for c in selectors
            )
            return self._run(sv.select, css, node)

        found: List[Any] = []
        if is_element(node) and self._run(sv.match, ", ".join(c.css() for c in selectors), node):
            found.append(node)
        descendants = [c.css() for c in selectors if not c.relative]
        if descendants:
            found.extend(self._run(sv.select, ", ".join(descendants), node))
        return found

    @staticmethod
    def _run(func, css: str, node: Any):
        try:
            return func(css, node)
        except sv.SelectorSyntaxError as e:
            raise SelectorSyntaxError(str(e), getattr(e, "col", 0) or 0) from e


__all__ = ["DomEngine"]
