"""
Очередь задач рендеринга.

Задача: пара (узел шаблона, область видимости). K рабочих корутин
разбирают ``asyncio.Queue``; обработчик задачи ставит в очередь дочерние
задачи до того, как задача будет отмечена выполненной, поэтому
``queue.join()`` не может завершиться преждевременно.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

from ..dom.nodes import Node, node_path
from .diagnostics import TASK, Diagnostics
from .scope import Scope

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 100


@dataclass
class Task:
    element: Node
    scope: Scope


TaskHandler = Callable[[Task, "TaskQueue"], Awaitable[None]]


class TaskQueue:
    """
    Очередь с ограниченным числом одновременно обрабатываемых задач.

    Args:
        handler: корутина обработки задачи; получает задачу и саму очередь
        concurrency: число рабочих корутин
        diagnostics: приёмник ошибок (упавшая задача не останавливает очередь)
    """

    def __init__(self, handler: TaskHandler, concurrency: int = DEFAULT_CONCURRENCY,
                 diagnostics: Optional[Diagnostics] = None):
        if concurrency < 1:
            raise ValueError(f"concurrency must be positive, got {concurrency}")
        self._handler = handler
        self.concurrency = concurrency
        self.diagnostics = diagnostics or Diagnostics()
        self._queue: "asyncio.Queue[Task]" = asyncio.Queue()
        self.processed = 0

    def enqueue(self, element: Node, scope: Scope) -> None:
        self._queue.put_nowait(Task(element, scope))

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    async def drain(self) -> None:
        """Обрабатывает задачи, пока очередь не опустеет и ни одна задача не выполняется."""
        logger.debug(f"Draining task queue: {self.pending} task(s) queued, {self.concurrency} worker(s)")
        workers: List[asyncio.Task] = [
            asyncio.create_task(self._worker()) for _ in range(self.concurrency)
        ]
        try:
            await self._queue.join()
        finally:
            for worker in workers:
                worker.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
        logger.debug(f"Task queue drained, {self.processed} task(s) processed")

    async def _worker(self) -> None:
        while True:
            task = await self._queue.get()
            try:
                await self._handler(task, self)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self.diagnostics.error(
                    TASK, f"Task failed: {e}", path=node_path(task.element) or None, exc_info=True
                )
            finally:
                self.processed += 1
                self._queue.task_done()


__all__ = ["DEFAULT_CONCURRENCY", "Task", "TaskHandler", "TaskQueue"]
