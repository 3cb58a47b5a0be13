"""
Выборка из JSON-подобных данных (dict/list/скаляры).

Кандидаты перебираются в порядке обхода в глубину (документный порядок),
составные селекторы сопоставляются справа налево, как в CSS-движках.
Массивы прозрачны: элементы получают ключ самого массива.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterator, List, Sequence

from ..formatting import format_value
from .model import Complex, Compound, Pseudo
from .parser import unquote
from .result import Location, Match


class SelectorEvaluationError(Exception):
    """Селектор синтаксически верен, но не применим к данным."""
    pass


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


TYPE_CHECKS: Dict[str, Callable[[Any], bool]] = {
    "string": lambda v: isinstance(v, str),
    "number": _is_number,
    "boolean": lambda v: isinstance(v, bool),
    "object": lambda v: isinstance(v, Mapping),
    "array": lambda v: isinstance(v, (list, tuple)),
    "null": lambda v: v is None,
}


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def never_matches(value: Any) -> bool:
    return value is None or value is False


def child_locations(location: Location) -> List[Location]:
    """Дочерние позиции значения; вложенные массивы разворачиваются."""
    value = location.value
    result: List[Location] = []

    if isinstance(value, Mapping):
        items = list(value.items())
        for position, (key, child) in enumerate(items):
            if _is_sequence(child):
                _flatten(child, key, location, result)
            else:
                result.append(Location.child(location, child, key, position, len(items)))
    elif _is_sequence(value):
        _flatten(value, location.key, location, result)

    return result


def _flatten(seq: Sequence[Any], key: Any, parent: Location, out: List[Location]) -> None:
    items = list(_leaves(seq))
    for position, item in enumerate(items):
        out.append(Location.child(parent, item, key, position, len(items), array_index=position))


def _leaves(seq: Sequence[Any]) -> Iterator[Any]:
    # позиции считаются по развёрнутой последовательности
    for item in seq:
        if _is_sequence(item):
            yield from _leaves(item)
        else:
            yield item


def iter_descendants(base: Location, include_base: bool) -> Iterator[Location]:
    """Обход в глубину в документном порядке."""
    if include_base:
        yield base
    stack = list(reversed(child_locations(base)))
    while stack:
        location = stack.pop()
        yield location
        stack.extend(reversed(child_locations(location)))


class JsonEngine:
    """
    Сопоставление селекторов с JSON-данными.

    Args:
        root: позиция глобального корня данных (для ``:root``)
    """

    def __init__(self, root: Location):
        self.root = root

    def select(self, selectors: Sequence[Complex], base: Location, self_match: bool) -> List[Match]:
        scoped = [c for c in selectors if not c.anchored_at_root]
        rooted = [c for c in selectors if c.anchored_at_root]

        matches: List[Match] = []
        if scoped:
            matches.extend(self._run(scoped, base, self_match))
        if rooted:
            matches.extend(self._run(rooted, self.root, True))
        return matches

    def _run(self, selectors: Sequence[Complex], base: Location, include_base: bool) -> Iterator[Match]:
        for location in iter_descendants(base, include_base):
            if never_matches(location.value):
                continue
            for complex_ in selectors:
                if self._match_complex(complex_, location, base, include_base):
                    yield Match(location.value, location)
                    break

    # --- сопоставление ------------------------------------------------------

    def _match_complex(self, complex_: Complex, location: Location, base: Location, include_base: bool) -> bool:
        parts = complex_.parts

        def within(candidate: Location) -> bool:
            if candidate is base:
                return include_base
            return candidate.depth > base.depth

        def anchored(candidate: Location) -> bool:
            if not complex_.relative:
                return True
            if include_base:
                return candidate is base
            return candidate.parent is base

        def match_from(candidate: Location, index: int) -> bool:
            combinator, compound = parts[index]
            if not self._match_compound(compound, candidate):
                return False
            if index == 0:
                return anchored(candidate)

            if combinator == ">":
                parent = candidate.parent
                return parent is not None and within(parent) and match_from(parent, index - 1)
            if combinator == " ":
                ancestor = candidate.parent
                while ancestor is not None and within(ancestor):
                    if match_from(ancestor, index - 1):
                        return True
                    ancestor = ancestor.parent
                return False
            raise SelectorEvaluationError(f"Combinator '{combinator}' is not supported for JSON data")

        return match_from(location, len(parts) - 1)

    def _match_compound(self, compound: Compound, location: Location) -> bool:
        if compound.ids or compound.attributes:
            raise SelectorEvaluationError(
                f"'{compound.source}': id and attribute selectors are not supported for JSON data"
            )

        if compound.type_name is not None and compound.type_name != "*":
            check = TYPE_CHECKS.get(compound.type_name.lower())
            if check is None:
                raise SelectorEvaluationError(f"Unknown JSON type '{compound.type_name}'")
            if not check(location.value):
                return False

        for key in compound.keys:
            if location.key != key:
                return False

        return all(self._match_pseudo(pseudo, location) for pseudo in compound.pseudos)

    def _match_pseudo(self, pseudo: Pseudo, location: Location) -> bool:
        name = pseudo.name
        if name == "root":
            return location is self.root or (location.parent is None and location.value is self.root.value)
        if name == "first-child":
            return location.index == 0
        if name == "last-child":
            return location.index == location.siblings - 1
        if name == "only-child":
            return location.siblings == 1
        if name == "nth-child":
            return self._match_nth(pseudo, location.index + 1)
        if name == "contains":
            return self._argument(pseudo) in self._text(location.value)
        if name == "val":
            return self._text(location.value) == self._argument(pseudo)
        if name == "empty":
            value = location.value
            return isinstance(value, (Mapping, list, tuple, str)) and len(value) == 0
        raise SelectorEvaluationError(f"Unknown pseudo-class ':{name}'")

    @staticmethod
    def _argument(pseudo: Pseudo) -> str:
        if pseudo.argument is None:
            raise SelectorEvaluationError(f"':{pseudo.name}' requires an argument")
        return unquote(pseudo.argument)

    @staticmethod
    def _text(value: Any) -> str:
        if isinstance(value, (Mapping, list, tuple)):
            return ""
        return format_value(value)

    def _match_nth(self, pseudo: Pseudo, position: int) -> bool:
        argument = self._argument(pseudo).strip().lower()
        if argument == "odd":
            return position % 2 == 1
        if argument == "even":
            return position % 2 == 0
        try:
            return position == int(argument)
        except ValueError:
            raise SelectorEvaluationError(f"Invalid :nth-child argument '{pseudo.argument}'") from None


__all__ = [
    "SelectorEvaluationError",
    "TYPE_CHECKS",
    "JsonEngine",
    "child_locations",
    "iter_descendants",
    "never_matches",
]
