"""
Recursive apply: ``data-apply="<selector>"``.

The selector runs over the pristine copy of the template document (not
over the data); every match is deep-copied and appended to the element
before its children are scheduled. A fragment that carries the same
``data-apply`` expands again one level deeper, as far as the data goes.
"""

from __future__ import annotations

import copy
from typing import Any

from ..dom.nodes import Node, append_child, get_attr, is_tree_node, node_path
from ..select import SelectorEvaluationError, SelectorSyntaxError, select
from .attributes import APPLY
from .diagnostics import SELECTOR, Diagnostics


def apply_templates(element: Node, document_clone: Any, diagnostics: Diagnostics) -> int:
    """Appends copies of the matched template fragments; returns how many were added."""
    expr = get_attr(element, APPLY)
    if not expr or not expr.strip():
        return 0

    try:
        result = select(element, expr, root=document_clone)
    except (SelectorSyntaxError, SelectorEvaluationError) as e:
        diagnostics.error(SELECTOR, f"Invalid data-apply selector '{expr}': {e}", path=node_path(element))
        return 0

    added = 0
    for match in result:
        if is_tree_node(match.value) and match.value is not element:
            append_child(element, copy.copy(match.value))
            added += 1
    return added


__all__ = ["apply_templates"]
