"""
Работа с деревом разметки: разбор, сериализация, примитивы узлов.
"""

from __future__ import annotations

from .documents import DocumentCloneCache, document_clone
from .markup import inner_html, load_html, parse_fragment, parse_html, serialize
from .whitespace import collapse_whitespace, compress

__all__ = [
    "DocumentCloneCache",
    "document_clone",
    "parse_html",
    "parse_fragment",
    "load_html",
    "serialize",
    "inner_html",
    "collapse_whitespace",
    "compress",
]
