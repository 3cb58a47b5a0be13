"""
Side table for per-render node bookkeeping.

Nodes stay plain bs4 objects: placeholders, the used-as-template flag and
the texts-wrapped flag are kept here, keyed by ``id(node)``. Every entry
holds a reference to its node so an id cannot be reused while the table
lives; the table is dropped together with the render session.
"""

from __future__ import annotations

import copy
from typing import Dict, Optional, Tuple

from ..dom.nodes import Node, Tag, detach, new_tag, node_path
from .diagnostics import STRUCTURE, Diagnostics

PLACEHOLDER_MARK = "template-placeholder"


class NodeTable:
    def __init__(self, diagnostics: Optional[Diagnostics] = None):
        self.diagnostics = diagnostics or Diagnostics()
        self._placeholders: Dict[int, Tuple[Node, Tag]] = {}
        self._templates: Dict[int, Node] = {}
        self._texts_done: Dict[int, Node] = {}

    # --- клонирование ------------------------------------------------------

    def placeholder(self, element: Node) -> Optional[Tag]:
        entry = self._placeholders.get(id(element))
        return entry[1] if entry is not None else None

    def clone(self, element: Tag) -> Optional[Tag]:
        """
        Deep copy of ``element`` inserted at its original position.

        The first call swaps the element for a placeholder span, so every
        copy lands in front of the placeholder in call order. The element
        itself becomes a template and is never rendered as output.
        """
        placeholder = self.placeholder(element)
        if placeholder is None:
            if element.parent is None:
                self.diagnostics.error(STRUCTURE, "Cannot clone a detached element", path=node_path(element))
                return None
            placeholder = new_tag(element, "span", {"data-tmp": PLACEHOLDER_MARK})
            element.insert_before(placeholder)
            element.extract()
            self._placeholders[id(element)] = (element, placeholder)

        if placeholder.parent is None:
            self.diagnostics.error(STRUCTURE, "Placeholder of a cloned element is detached", path=node_path(element))
            return None

        instance = copy.copy(element)
        self._templates[id(element)] = element
        placeholder.insert_before(instance)
        return instance

    def clone_after(self, element: Tag, reference: Tag) -> Optional[Tag]:
        """Another copy of template ``element`` right after ``reference``."""
        if reference.parent is None:
            self.diagnostics.error(STRUCTURE, "Cannot insert a copy after a detached element", path=node_path(element))
            return None
        instance = copy.copy(element)
        self._templates[id(element)] = element
        reference.insert_after(instance)
        return instance

    def is_template(self, element: Node) -> bool:
        return id(element) in self._templates and self._templates[id(element)] is element

    def remove(self, element: Optional[Node]) -> None:
        """Detaches the element and its placeholder (if any)."""
        if element is None:
            return
        entry = self._placeholders.pop(id(element), None)
        if entry is not None and entry[0] is element:
            detach(entry[1])
        detach(element)

    # --- текстовые span'ы --------------------------------------------------

    def texts_done(self, node: Node) -> bool:
        entry = self._texts_done.get(id(node))
        return entry is not None and entry is node

    def mark_texts_done(self, node: Node) -> None:
        self._texts_done[id(node)] = node

    def __len__(self) -> int:
        return len(self._placeholders) + len(self._templates) + len(self._texts_done)


__all__ = ["PLACEHOLDER_MARK", "NodeTable"]
