"""
Кэш «рабочих копий» документов.

Копия исходного шаблона нужна директиве ``data-apply``: селекторы фрагментов
выполняются по нетронутому документу, а не по дереву, которое уже
изменяется рендерингом. Копия создаётся один раз на экземпляр документа
и переиспользуется последующими вызовами.
"""

from __future__ import annotations

import asyncio
import copy
import logging
import weakref
from typing import Dict, Optional

from .nodes import Node

logger = logging.getLogger(__name__)


class DocumentCloneCache:
    """
    Кэш копий, ключом служит идентичность документа.

    Узлы bs4 хешируются по содержимому, поэтому ``WeakKeyDictionary``
    не подходит; запись удаляется через ``weakref.finalize`` вместе с документом.
    """

    def __init__(self) -> None:
        self._clones: Dict[int, Node] = {}

    def get(self, document: Node) -> Optional[Node]:
        return self._clones.get(id(document))

    def put(self, document: Node, clone: Node) -> None:
        key = id(document)
        if key not in self._clones:
            weakref.finalize(document, self._clones.pop, key, None)
        self._clones[key] = clone

    def __len__(self) -> int:
        return len(self._clones)


_default_cache = DocumentCloneCache()


async def document_clone(document: Node, cache: Optional[DocumentCloneCache] = None) -> Node:
    """
    Возвращает рабочую копию документа, создавая её при первом обращении.

    Копирование выполняется вне цикла событий; ошибки копирования
    пробрасываются вызывающему (это фатальная ошибка подготовки рендера).
    """
    cache = cache if cache is not None else _default_cache
    cached = cache.get(document)
    if cached is not None:
        return cached

    clone = await asyncio.to_thread(copy.copy, document)
    cache.put(document, clone)
    logger.debug("Created working copy of document %s", type(document).__name__)
    return clone


__all__ = ["DocumentCloneCache", "document_clone"]
