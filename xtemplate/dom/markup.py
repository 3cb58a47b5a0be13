"""
Разбор и сериализация разметки.

Тонкая обёртка над BeautifulSoup (backend ``html.parser``). Многозначные
атрибуты отключены: ``class`` хранится строкой, как и остальные атрибуты.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

from bs4 import BeautifulSoup

from .nodes import Node, children, is_document

Markup = Union[str, bytes]

PARSER = "html.parser"


def parse_html(markup: Markup) -> BeautifulSoup:
    """Разбирает документ или фрагмент в дерево."""
    return BeautifulSoup(markup, PARSER, multi_valued_attributes=None)


def parse_fragment(markup: Markup) -> List[Node]:
    """Разбирает фрагмент и возвращает его верхние узлы, отсоединённые от временного документа."""
    soup = parse_html(markup)
    return [node.extract() for node in children(soup)]


def load_html(path: Path) -> BeautifulSoup:
    return parse_html(path.read_text(encoding="utf-8"))


def serialize(node: Node) -> str:
    """
    Сериализует узел (или весь документ) обратно в разметку.

    Именованные сущности не сохраняются: парсер декодирует их в символы,
    и на выходе ``&nbsp;`` становится ``\\xa0``. Экранируются только
    ``&``, ``<`` и ``>``, поэтому ``&amp;`` возвращается как был.
    """
    if is_document(node):
        return node.decode()
    return str(node)


def inner_html(node: Node) -> str:
    decode_contents = getattr(node, "decode_contents", None)
    return decode_contents() if decode_contents is not None else str(node)


__all__ = ["Markup", "PARSER", "parse_html", "parse_fragment", "load_html", "serialize", "inner_html"]
