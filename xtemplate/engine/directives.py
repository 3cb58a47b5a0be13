"""
Обработка директив одного элемента шаблона.

Порядок шагов (каждый может удалить элемент и остановить обработку):

1. ``data-$name``: присваивание переменных;
2. ``data-to-<attr>``: первое значение выборки в атрибут;
3. ``data-not``: непустая выборка удаляет элемент;
4. ``data-if``: пустая выборка удаляет элемент;
5. ``data-is``: по клону на каждое значение, значения проходят цепочку рендереров.

Без директив элемент остаётся как есть, его дети планируются
в текущей области видимости.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any, FrozenSet, List, Optional, Tuple

from ..dom.nodes import (
    Node,
    Tag,
    attr_items,
    children,
    get_attr,
    is_element,
    is_tree_node,
    set_attr,
    unwrap_into_parent,
)
from ..dom.whitespace import compress
from ..formatting import format_value
from ..select import Match, ResultSet
from . import attributes as attrs
from .apply import apply_templates
from .renderers import RenderRequest, RenderStep
from .scheduler import Task, TaskQueue
from .scope import Scope
from .texts import wrap_text_spans

if TYPE_CHECKING:
    from .session import RenderSession

logger = logging.getLogger(__name__)

# (элемент, чьи дети планируются; область видимости для детей)
NextStep = Tuple[Node, Scope]


def _truthy(value: Any) -> bool:
    if is_tree_node(value):
        return True
    return bool(value)


class DirectiveProcessor:
    """Обработчик задач очереди: применяет директивы к элементу и планирует детей."""

    def __init__(self, session: "RenderSession"):
        self.session = session

    async def __call__(self, task: Task, queue: TaskQueue) -> None:
        element: Optional[Node] = task.element
        scope = task.scope
        session = self.session

        if not session.config.debug:
            element = compress(element)
            if element is None:
                return

        if not is_element(element):
            self._enqueue(queue, element, [(element, scope)])
            return

        if session.table.is_template(element):
            return

        options = attrs.options(element)
        self_match = attrs.SELF in options

        self._assign_variables(element, scope, self_match)
        self._bind_attributes(element, scope, self_match)

        expr = get_attr(element, attrs.NOT)
        if expr is not None and len(scope.resolve(expr, self_match=self_match)) > 0:
            session.table.remove(element)
            return

        expr = get_attr(element, attrs.IF)
        if expr is not None and len(scope.resolve(expr, self_match=self_match)) == 0:
            session.table.remove(element)
            return

        expr = get_attr(element, attrs.IS)
        if expr is not None:
            result = scope.resolve(expr, self_match=self_match)
            if len(result) == 0:
                session.table.remove(element)
                return
            next_steps = await self._expand(element, scope, result, options)
            self._enqueue(queue, element, next_steps)
            return

        self._enqueue(queue, element, [(element, scope)])

    # --- шаги -------------------------------------------------------------------

    @staticmethod
    def _assign_variables(element: Tag, scope: Scope, self_match: bool) -> None:
        for name, value in attr_items(element):
            if name.startswith(attrs.VARIABLE_PREFIX):
                scope.resolve(f"{name[len('data-'):]}={value}", self_match=self_match)

    @staticmethod
    def _bind_attributes(element: Tag, scope: Scope, self_match: bool) -> None:
        for name, value in attr_items(element):
            if not name.startswith(attrs.TARGET_PREFIX) or len(name) == len(attrs.TARGET_PREFIX):
                continue
            first = scope.resolve(value, self_match=self_match).first()
            if _truthy(first):
                set_attr(element, name[len(attrs.TARGET_PREFIX):], format_value(first))

    async def _expand(self, element: Tag, scope: Scope, result: ResultSet,
                      options: FrozenSet[str]) -> List[NextStep]:
        """
        Клонирует элемент по числу значений (в порядке выборки) и ждёт,
        пока цепочка рендереров отработает для всех значений.
        """
        table = self.session.table
        pairs: List[Tuple[Tag, Match]] = []
        for match in result:
            instance = table.clone(element)
            if instance is not None:
                pairs.append((instance, match))

        steps = await asyncio.gather(*(
            self._render(instance, match, options) for instance, match in pairs
        ))

        pass_scope = attrs.PASS in options
        next_steps: List[NextStep] = []
        for (instance, match), step in zip(pairs, steps):
            if step.stopped:
                attrs.strip_directives(instance)
                continue

            value = step.value if step.value is not None else match.value
            values = value if isinstance(value, list) else [value]
            if not values:
                table.remove(instance)
                continue

            target: Optional[Tag] = instance
            for index, item in enumerate(values):
                if index > 0:
                    target = table.clone_after(element, target)
                    if target is None:
                        break
                if pass_scope:
                    next_steps.append((target, scope))
                    continue
                location = match.location if item is match.location.value else replace(match.location, value=item)
                next_steps.append((target, scope.child(item, location)))

        return next_steps

    async def _render(self, instance: Tag, match: Match, options: FrozenSet[str]) -> RenderStep:
        session = self.session
        request = RenderRequest(
            element=instance,
            value=match.value,
            location=match.location,
            options=options,
            debug=session.config.debug,
            diagnostics=session.diagnostics,
        )
        return await session.chain.run(request)

    def _enqueue(self, queue: TaskQueue, element: Node, next_steps: List[NextStep]) -> None:
        """
        Подготовка элементов и постановка их детей в очередь.

        Шаблон, использованный для клонирования, удаляется вместе
        с плейсхолдером.
        """
        session = self.session
        if session.table.is_template(element):
            session.table.remove(element)

        for parent, child_scope in next_steps:
            if session.table.is_template(parent):
                continue

            options = attrs.options(parent)

            if is_element(parent):
                apply_templates(parent, session.document_clone, session.diagnostics)
                attrs.strip_directives(parent)

            if attrs.TEXTS in options and is_tree_node(child_scope.object):
                wrap_text_spans(child_scope.object, session.table)

            for child in children(parent):
                queue.enqueue(child, child_scope)

            if attrs.INVISIBLE in options and is_element(parent):
                unwrap_into_parent(parent)


__all__ = ["DirectiveProcessor", "NextStep"]
