"""
Сжатие пробельных символов в шаблоне.

Схлопывает последовательности пробелов в непосредственных текстовых детях
элемента и удаляет комментарии шаблона. Пустые текстовые узлы не удаляются,
чтобы позиционная замена текстов вела себя одинаково со сжатием и без него.
"""

from __future__ import annotations

import re
from typing import Optional

from .nodes import Node, children, detach, is_comment, is_document, is_element, is_text, new_text, tag_name

# Элементы, в которых пробелы значимы
SENSITIVE_TAGS = frozenset({"pre", "script", "style", "textarea"})

_RUN = re.compile(r"([ \t\r\f\n\u200b])[ \t\r\f\u200b]*")
_BEFORE_NEWLINE = re.compile(r"[ \t\r\f\u200b]\n")
_NEWLINES = re.compile(r"\n+")


def collapse_whitespace(text: str) -> str:
    """Оставляет первый пробельный символ серии, переводы строк схлопываются в один."""
    result = _RUN.sub(r"\1", text)
    result = _BEFORE_NEWLINE.sub("\n", result)
    return _NEWLINES.sub("\n", result)


def compress_text(node: Node) -> Node:
    """Возвращает текстовый узел со сжатыми пробелами (новый узел, если текст изменился)."""
    text = str(node)
    compressed = collapse_whitespace(text)
    if compressed == text:
        return node
    replacement = new_text(compressed)
    if node.parent is not None:
        node.replace_with(replacement)
    return replacement


def compress(node: Node) -> Optional[Node]:
    """
    Сжимает узел шаблона перед обработкой.

    Returns:
        Узел или None, если узел был удалён (комментарий)
    """
    if is_comment(node):
        detach(node)
        return None
    if is_element(node) or is_document(node):
        if tag_name(node) not in SENSITIVE_TAGS:
            for child in children(node):
                if is_text(child):
                    compress_text(child)
    return node


__all__ = ["SENSITIVE_TAGS", "collapse_whitespace", "compress_text", "compress"]
