"""
Один вызов рендеринга: общие для всех задач объекты и запуск очереди.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from ..dom.documents import DocumentCloneCache, document_clone
from ..dom.nodes import Node, owner_document
from ..errors import TemplateSetupError
from ..select import Location
from .bookkeeping import NodeTable
from .diagnostics import Diagnostics
from .directives import DirectiveProcessor
from .renderers import RendererChain
from .scheduler import TaskQueue
from .scope import Scope

if TYPE_CHECKING:
    from ..config import RenderConfig

logger = logging.getLogger(__name__)


class RenderSession:
    """
    Состояние одного рендеринга.

    Таблица служебных пометок узлов, цепочка рендереров и рабочая копия
    документа живут ровно столько, сколько сессия.
    """

    def __init__(self, config: "RenderConfig", clone_cache: Optional[DocumentCloneCache] = None):
        self.config = config
        self.diagnostics = Diagnostics(config.log)
        self.table = NodeTable(self.diagnostics)
        self.chain = RendererChain(config.renderers, diagnostics=self.diagnostics)
        self.clone_cache = clone_cache
        self.document_clone: Any = None

    async def prepare(self, element: Node) -> None:
        """
        Одноразовая подготовка: рабочая копия документа для ``data-apply``.

        Raises:
            TemplateSetupError: копию получить не удалось
        """
        document = owner_document(element)
        try:
            self.document_clone = await document_clone(document, self.clone_cache)
        except Exception as e:
            self.diagnostics.log.error("Could not get document copy for data-apply evaluation", exc_info=True)
            raise TemplateSetupError(f"Could not prepare template document: {e}", cause=e) from e

    def root_scope(self, data: Any) -> Scope:
        root_value = self.config.root if self.config.root is not None else data
        root = Location(value=root_value)
        context = root if root_value is data else Location(value=data)
        return Scope(data, context, root=root, diagnostics=self.diagnostics)

    async def run(self, element: Node, data: Any) -> Node:
        """Рендерит ``element`` на месте и возвращает его после опустошения очереди."""
        await self.prepare(element)

        queue = TaskQueue(DirectiveProcessor(self), self.config.concurrency, self.diagnostics)
        queue.enqueue(element, self.root_scope(data))
        await queue.drain()

        logger.debug(f"Render finished: {queue.processed} task(s), {len(self.diagnostics.problems)} problem(s)")
        return element


__all__ = ["RenderSession"]
