"""
Directive attribute vocabulary.

Directive attributes never reach the output: they are stripped from an
element before its children are scheduled. Literal ``data-*`` attributes
imported from tree data travel escaped as ``data-data-*`` and are restored
right after stripping.
"""

from __future__ import annotations

from typing import FrozenSet, List, Optional

from ..dom.nodes import Node, attr_items, get_attr, is_element, remove_attr, set_attr

DATA_PREFIX = "data-"
ESCAPED_PREFIX = "data-data-"
VARIABLE_PREFIX = "data-$"
TARGET_PREFIX = "data-to-"

IS = "data-is"
IF = "data-if"
NOT = "data-not"
APPLY = "data-apply"
OPTION = "data-option"
ATTRIBUTES = "data-attributes"
EXCLUDE_ATTRIBUTES = "data-exclude-attributes"
CLASS = "data-class"
EXCLUDE_CLASS = "data-exclude-class"
EXCLUDE_TEXTS = "data-exclude-texts"

DIRECTIVES: FrozenSet[str] = frozenset({
    IS, IF, NOT, APPLY, OPTION,
    ATTRIBUTES, EXCLUDE_ATTRIBUTES, CLASS, EXCLUDE_CLASS, EXCLUDE_TEXTS,
    # устаревшие атрибуты, удаляются для совместимости
    "data-query", "data-querykey",
})

# data-option
INVISIBLE = "invisible"
PASS = "pass"
SELF = "self"
INNER = "inner"
TEXTS = "texts"

_FALSE_WORDS = {"", "false", "0", "no", "off"}


def options(element: Node) -> FrozenSet[str]:
    """Render options from ``data-option`` (whitespace separated)."""
    value = get_attr(element, OPTION)
    return frozenset(value.split()) if value else frozenset()


def word_list(element: Node, name: str) -> Optional[List[str]]:
    """Whitespace separated list attribute; None when absent or empty."""
    value = get_attr(element, name)
    return value.split() if value else None


def flag(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in _FALSE_WORDS


def is_directive(name: str) -> bool:
    return (
        name in DIRECTIVES
        or name.startswith(VARIABLE_PREFIX)
        or name.startswith(TARGET_PREFIX)
    )


def escape_name(name: str) -> str:
    """``data-foo`` → ``data-data-foo``; other names unchanged."""
    return DATA_PREFIX + name if name.startswith(DATA_PREFIX) else name


def strip_directives(element: Node) -> None:
    """Removes directive attributes, then restores escaped ``data-data-*``."""
    if not is_element(element):
        return
    items = attr_items(element)
    for name, _ in items:
        if not name.startswith(ESCAPED_PREFIX) and is_directive(name):
            remove_attr(element, name)
    for name, value in items:
        if name.startswith(ESCAPED_PREFIX):
            remove_attr(element, name)
            set_attr(element, name[len(DATA_PREFIX):], value)


__all__ = [
    "IS", "IF", "NOT", "APPLY", "OPTION",
    "ATTRIBUTES", "EXCLUDE_ATTRIBUTES", "CLASS", "EXCLUDE_CLASS", "EXCLUDE_TEXTS",
    "DIRECTIVES", "VARIABLE_PREFIX", "TARGET_PREFIX",
    "INVISIBLE", "PASS", "SELF", "INNER", "TEXTS",
    "options", "word_list", "flag", "is_directive", "escape_name", "strip_directives",
]
