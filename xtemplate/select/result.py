"""
Result of a selector evaluation.

A ``Location`` remembers where a value was found (key, position among its
siblings and the parent location). Arrays are transparent: an element of
``{"items": [a, b]}`` is reported with key ``"items"`` and index 0 or 1.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Iterable, Iterator, List, Optional, Tuple, Union

from ..dom.nodes import is_tree_node, node_path

Key = Union[str, int, None]


@dataclass(eq=False)
class Location:
    value: Any
    key: Key = None
    parent: Optional["Location"] = None
    index: int = 0
    siblings: int = 1
    depth: int = 0
    array_index: Optional[int] = None

    @classmethod
    def child(cls, parent: "Location", value: Any, key: Key, index: int, siblings: int,
              array_index: Optional[int] = None) -> "Location":
        return cls(value=value, key=key, parent=parent, index=index, siblings=siblings,
                   depth=parent.depth + 1, array_index=array_index)

    @property
    def path(self) -> Tuple[Any, ...]:
        steps: List[Any] = []
        current: Optional[Location] = self
        while current is not None and current.parent is not None:
            step: Any = current.key
            if current.array_index is not None:
                step = (current.key, current.array_index)
            steps.append(step)
            current = current.parent
        return tuple(reversed(steps))

    def identity(self) -> Hashable:
        if is_tree_node(self.value):
            return ("node", id(self.value))
        return ("data", self.path, self.depth)

    def describe(self) -> str:
        """Human readable path like ``$.result[0].name``."""
        if is_tree_node(self.value):
            return node_path(self.value) or "#document"
        text = "$"
        for step in self.path:
            if isinstance(step, tuple):
                key, position = step
                text += (f".{key}" if key is not None else "") + f"[{position}]"
            elif step is not None:
                text += f".{step}"
        return text

    def __repr__(self) -> str:
        return f"Location({self.describe()})"


@dataclass(frozen=True, eq=False)
class Match:
    value: Any
    location: Location


class ResultSet:
    """
    Ordered, de-duplicated collection of matches.

    Iterating yields ``Match`` objects; ``values()`` returns plain values.
    """

    def __init__(self, matches: Iterable[Match] = (), selector: str = ""):
        self.selector = selector
        self._matches: List[Match] = []
        seen = set()
        for match in matches:
            ident = match.location.identity()
            if ident in seen:
                continue
            seen.add(ident)
            self._matches.append(match)

    @classmethod
    def empty(cls, selector: str = "") -> "ResultSet":
        return cls((), selector)

    def union(self, other: "ResultSet") -> "ResultSet":
        return ResultSet([*self._matches, *other._matches], self.selector)

    def values(self) -> List[Any]:
        return [m.value for m in self._matches]

    def first(self) -> Optional[Any]:
        return self._matches[0].value if self._matches else None

    def __iter__(self) -> Iterator[Match]:
        return iter(self._matches)

    def __len__(self) -> int:
        return len(self._matches)

    def __getitem__(self, index: int) -> Match:
        return self._matches[index]

    def __repr__(self) -> str:
        return f"ResultSet({self.selector!r}, {len(self._matches)} match(es))"


__all__ = ["Key", "Location", "Match", "ResultSet"]
