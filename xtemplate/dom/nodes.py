"""
Примитивы работы с деревом разметки поверх BeautifulSoup.

Движок не обращается к bs4 напрямую: все проверки типов узлов,
чтение/запись атрибутов и перестановки узлов собраны здесь.

Важно: ``Tag`` в bs4 сравнивается по содержимому и пустой ``Tag``
ложен в булевом контексте, поэтому узлы сравниваются только через ``is``
и проверяются на ``None`` явно.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from bs4 import BeautifulSoup
from bs4.element import Comment, NavigableString, PageElement, PreformattedString, Tag

Node = PageElement


# --- классификация узлов ---------------------------------------------------

def is_document(node: object) -> bool:
    """Корень документа (сам ``BeautifulSoup``)."""
    return isinstance(node, BeautifulSoup)


def is_element(node: object) -> bool:
    """Элемент разметки с атрибутами (документ элементом не считается)."""
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def is_text(node: object) -> bool:
    """Обычный текстовый узел (без комментариев, CDATA, doctype)."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def is_comment(node: object) -> bool:
    return isinstance(node, Comment)


def is_tree_node(value: object) -> bool:
    """Значение данных является узлом дерева, а не JSON-значением."""
    return isinstance(value, PageElement)


def tag_name(node: object) -> str:
    return node.name.lower() if is_element(node) and node.name else ""


# --- атрибуты --------------------------------------------------------------

def get_attr(node: Node, name: str) -> Optional[str]:
    """
    Возвращает значение атрибута строкой.

    bs4 может хранить многозначные атрибуты (``class``) списком,
    такие значения склеиваются через пробел.
    """
    if not is_element(node):
        return None
    value = node.attrs.get(name)
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def set_attr(node: Node, name: str, value: str) -> None:
    node.attrs[name] = value


def remove_attr(node: Node, name: str) -> None:
    node.attrs.pop(name, None)


def attr_items(node: Node) -> List[tuple[str, str]]:
    """Снимок атрибутов в исходном порядке (безопасен для изменения узла)."""
    if not is_element(node):
        return []
    return [(name, get_attr(node, name) or "") for name in list(node.attrs.keys())]


# --- навигация -------------------------------------------------------------

def children(node: Node) -> List[Node]:
    """Копия списка дочерних узлов."""
    contents = getattr(node, "contents", None)
    return list(contents) if contents else []


def owner_document(node: Node) -> Node:
    """Самый верхний предок узла (обычно ``BeautifulSoup``)."""
    top = node
    while top.parent is not None:
        top = top.parent
    return top


def ancestors_or_self(node: Node) -> Iterator[Node]:
    current: Optional[Node] = node
    while current is not None:
        yield current
        current = current.parent


def language(node: Node) -> Optional[str]:
    """Ближайший атрибут ``lang`` вверх по дереву."""
    for current in ancestors_or_self(node):
        lang = get_attr(current, "lang")
        if lang:
            return lang
    return None


def node_path(node: Node) -> str:
    """Путь вида ``html/body/div#2`` для диагностики."""
    parts = []
    for current in ancestors_or_self(node):
        if is_element(current):
            parent = current.parent
            index = parent.index(current) if parent is not None else 0
            parts.append(f"{current.name}#{index}")
    return "/".join(reversed(parts))


# --- изменение дерева ------------------------------------------------------

def new_tag(anchor: Node, name: str, attrs: Optional[Dict[str, str]] = None) -> Tag:
    """Создаёт элемент в документе узла ``anchor``."""
    doc = owner_document(anchor)
    if is_document(doc):
        return doc.new_tag(name, attrs=dict(attrs or {}))
    return Tag(name=name, attrs=dict(attrs or {}))


def new_text(text: str) -> NavigableString:
    return NavigableString(text)


def new_comment(text: str) -> Comment:
    return Comment(text)


def detach(node: Optional[Node]) -> None:
    """Отсоединяет узел вместе с поддеревом."""
    if node is not None and node.parent is not None:
        node.extract()


def append_child(parent: Tag, node: Node) -> None:
    parent.append(node)


def set_text(node: Tag, text: str) -> None:
    """Заменяет всё содержимое элемента одним текстовым узлом."""
    node.clear()
    node.append(NavigableString(text))


def text_content(node: Node) -> str:
    if is_text(node):
        return str(node)
    if isinstance(node, Tag):
        return node.get_text()
    return ""


def unwrap_into_parent(node: Tag) -> None:
    """Переносит детей узла на его место и удаляет сам узел."""
    if node.parent is None:
        return
    for child in children(node):
        node.insert_before(child.extract())
    node.extract()


__all__ = [
    "Node", "Tag", "NavigableString", "Comment",
    "is_document", "is_element", "is_text", "is_comment", "is_tree_node", "tag_name",
    "get_attr", "set_attr", "remove_attr", "attr_items",
    "children", "owner_document", "ancestors_or_self", "language", "node_path",
    "new_tag", "new_text", "new_comment", "detach", "append_child", "set_text", "text_content",
    "unwrap_into_parent",
]
