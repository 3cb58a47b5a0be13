"""
Wrapping of data text nodes into ``<span class="text">``.

Used by the ``texts`` render option: once every text node of tree data is
an element, templates can select and transform text with ``> span.text``.
"""

from __future__ import annotations

from ..dom.nodes import Node, children, get_attr, is_text, new_tag, tag_name
from .bookkeeping import NodeTable

TEXT_SPAN_MARK = "added-text-span"


def _already_wrapped(text: Node) -> bool:
    parent = text.parent
    if tag_name(parent) != "span":
        return False
    classes = (get_attr(parent, "class") or "").split()
    alone = text.next_sibling is None and text.previous_sibling is None
    return "text" in classes or alone


def wrap_text_spans(node: Node, table: NodeTable) -> Node:
    """Recursively wraps text nodes under ``node``; each node is visited once per render."""
    if table.texts_done(node):
        return node
    table.mark_texts_done(node)

    if is_text(node):
        if node.parent is None or _already_wrapped(node):
            return node
        span = new_tag(node, "span", {"class": "text", "data-tmp": TEXT_SPAN_MARK})
        node.insert_before(span)
        span.append(node.extract())
        table.mark_texts_done(span)
        return span

    for child in children(node):
        wrap_text_spans(child, table)
    return node


__all__ = ["TEXT_SPAN_MARK", "wrap_text_spans"]
