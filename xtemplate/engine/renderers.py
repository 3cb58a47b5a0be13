"""
Цепочка рендереров: значение данных → изменения целевого узла.

Рендерер: вызываемый объект ``(RenderRequest) -> RenderStep``
(синхронный или возвращающий awaitable). Рендереры вызываются по порядку:

- ``Outcome.STOP``: значение обработано, дальше цепочка не идёт;
- ``Outcome.CONTINUE``: рендерер отказался или заменил значение
  (``step.value``) и передал его следующему;
- ``Outcome.FAILED``: рендерер упал; ошибка записана в лог,
  значение не изменено, цепочка продолжается.

Пользовательские рендереры ставятся перед встроенными и могут их
перекрыть. Исключение в завершающем рендерере пробрасывается наружу.
"""

from __future__ import annotations

import enum
import inspect
import logging
import re
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, FrozenSet, Iterable, List, Optional, Sequence, Union

from ..dom.markup import inner_html, parse_fragment
from ..dom.nodes import (
    Node,
    ancestors_or_self,
    append_child,
    attr_items,
    children,
    get_attr,
    is_element,
    is_text,
    is_tree_node,
    language,
    new_comment,
    new_text,
    node_path,
    set_attr,
    set_text,
    tag_name,
)
from ..dom.whitespace import collapse_whitespace
from ..formatting import format_date, format_value, is_primitive
from ..select import Location
from . import attributes as attrs
from .diagnostics import RENDERER, Diagnostics

logger = logging.getLogger(__name__)


class Outcome(enum.Enum):
    CONTINUE = "continue"
    STOP = "stop"
    FAILED = "failed"


@dataclass(frozen=True)
class RenderStep:
    outcome: Outcome
    value: Any = None
    error: Optional[BaseException] = None

    @classmethod
    def stop(cls) -> "RenderStep":
        return cls(Outcome.STOP)

    @classmethod
    def proceed(cls, value: Any = None) -> "RenderStep":
        """Отказ (value=None) или передача нового значения дальше."""
        return cls(Outcome.CONTINUE, value)

    @property
    def stopped(self) -> bool:
        return self.outcome is Outcome.STOP


@dataclass(frozen=True)
class RenderRequest:
    """
    Всё, что нужно рендереру.

    Attributes:
        element: целевой узел (клон шаблона)
        value: текущее значение (может быть заменено предыдущим рендерером)
        location: где значение найдено в данных (ключ, индекс, родитель)
        options: токены ``data-option`` целевого узла
        debug: режим отладки (без сжатия пробелов, с диагностическими комментариями)
    """
    element: Node
    value: Any
    location: Optional[Location] = None
    options: FrozenSet[str] = frozenset()
    debug: bool = False
    diagnostics: Diagnostics = field(default_factory=Diagnostics, compare=False)

    @property
    def key(self) -> Any:
        return self.location.key if self.location is not None else None

    def with_value(self, value: Any) -> "RenderRequest":
        return replace(self, value=value)


Renderer = Callable[[RenderRequest], Union[RenderStep, None, Awaitable[Optional[RenderStep]]]]


# --- встроенные рендереры ------------------------------------------------------

_DATE_KEY_RE = re.compile(r"[Dd]ate$")
_URL_ATTRIBUTES = ("href", "action", "src")
_FORM_TAGS = {"input", "select", "textarea", "option", "button"}


def render_date(request: RenderRequest) -> RenderStep:
    """Ключ оканчивается на Date/date и значение похоже на дату."""
    key, value = request.key, request.value
    if not (isinstance(key, str) and _DATE_KEY_RE.search(key)):
        return RenderStep.proceed()
    if is_tree_node(value) or isinstance(value, bool) or not value:
        return RenderStep.proceed()
    text = format_date(value, language(request.element))
    if text is None:
        return RenderStep.proceed()
    set_text(request.element, text)
    return RenderStep.stop()


def render_url(request: RenderRequest) -> RenderStep:
    """Ключ ``url``: строка идёт в href, action или src."""
    value = request.value
    if request.key != "url" or not isinstance(value, str) or is_tree_node(value) or not value:
        return RenderStep.proceed()
    for name in _URL_ATTRIBUTES:
        if get_attr(request.element, name):
            set_attr(request.element, name, value)
            return RenderStep.stop()
    return RenderStep.proceed()


def render_form_control(request: RenderRequest) -> RenderStep:
    element, value = request.element, request.value
    if tag_name(element) not in _FORM_TAGS or is_tree_node(value):
        return RenderStep.proceed()
    if tag_name(element) == "textarea":
        set_text(element, format_value(value))
    else:
        input_type = get_attr(element, "type")
        if not input_type or input_type.lower() != "checkbox":
            set_attr(element, "value", format_value(value))
    return RenderStep.stop()


def render_image(request: RenderRequest) -> RenderStep:
    if tag_name(request.element) != "img" or is_tree_node(request.value):
        return RenderStep.proceed()
    set_attr(request.element, "src", format_value(request.value))
    return RenderStep.stop()


def render_text(request: RenderRequest) -> RenderStep:
    value = request.value
    if value is None or not is_primitive(value) or (is_tree_node(value) and not is_text(value)):
        return RenderStep.proceed()
    set_text(request.element, format_value(value))
    return RenderStep.stop()


def _allowed(token: str, include: Optional[List[str]], exclude: Optional[List[str]]) -> bool:
    if include is not None and token not in include and "*" not in include:
        return False
    if exclude is not None and (token in exclude or "*" in exclude):
        return False
    return True


def _debug_comment(element: Node, source: Node) -> str:
    parents = [tag_name(n) for n in ancestors_or_self(source.parent) if is_element(n)] if source.parent is not None else []
    text = "dom2dom:" + "/".join(list(reversed(parents)) + [f"<{tag_name(source)}"])
    for name, value in attr_items(source):
        text += f' {name}="{value}"'
    return text + " >"


def _merge_attributes(element: Node, source: Node) -> None:
    include = attrs.word_list(element, attrs.ATTRIBUTES)
    exclude = attrs.word_list(element, attrs.EXCLUDE_ATTRIBUTES)
    include_class = attrs.word_list(element, attrs.CLASS)
    exclude_class = attrs.word_list(element, attrs.EXCLUDE_CLASS)

    for name, value in attr_items(source):
        if not _allowed(name, include, exclude):
            continue
        if name == "class":
            selected = [c for c in value.split() if _allowed(c, include_class, exclude_class)]
            value = " ".join(selected + (get_attr(element, "class") or "").split())
        set_attr(element, attrs.escape_name(name), value)


def _merge_texts(element: Node, source: Node, debug: bool) -> None:
    """
    Позиционная замена текстовых узлов.

    Лишние текстовые узлы цели удаляются, лишние узлы источника
    добавляются после последнего заменённого.
    """
    def copy_text(node: Node) -> Node:
        text = str(node)
        return new_text(text if debug else collapse_whitespace(text))

    sources = [c for c in children(source) if is_text(c)]
    position = 0
    last: Optional[Node] = None

    for target in children(element):
        if not is_text(target):
            continue
        if position < len(sources):
            replacement = copy_text(sources[position])
            position += 1
            target.insert_before(replacement)
            last = replacement
        target.extract()

    for node in sources[position:]:
        replacement = copy_text(node)
        if last is not None:
            last.insert_after(replacement)
        else:
            append_child(element, replacement)
        last = replacement


def render_tree(request: RenderRequest) -> RenderStep:
    """Значение: узел дерева. Слияние атрибутов и текста, значение идёт дальше."""
    element, source = request.element, request.value
    if not is_tree_node(source) or is_text(source) or not hasattr(source, "contents"):
        return RenderStep.proceed()

    comment = _debug_comment(element, source) if request.debug else None

    if is_element(source):
        _merge_attributes(element, source)

    if attrs.INNER in request.options:
        element.clear()
        html = inner_html(source).replace("data-", "data-data-")
        for node in parse_fragment(html):
            append_child(element, node)
    elif not attrs.flag(get_attr(element, attrs.EXCLUDE_TEXTS)):
        _merge_texts(element, source, request.debug)

    if comment is not None:
        element.insert(0, new_comment(comment))

    return RenderStep.proceed(source)


def render_terminal(request: RenderRequest) -> RenderStep:
    return RenderStep.proceed(request.value)


BUILTIN_RENDERERS: Sequence[Renderer] = (
    render_date,
    render_url,
    render_form_control,
    render_image,
    render_text,
    render_tree,
)


def _name(renderer: Any) -> str:
    return getattr(renderer, "__qualname__", None) or getattr(renderer, "__name__", None) or repr(renderer)


class RendererChain:
    """
    Упорядоченная цепочка: пользовательские рендереры, встроенные, завершающий.

    Некорректные (невызываемые) элементы отбрасываются с записью в лог.
    """

    def __init__(
        self,
        renderers: Iterable[Any] = (),
        *,
        diagnostics: Optional[Diagnostics] = None,
        builtins: Sequence[Renderer] = BUILTIN_RENDERERS,
        terminal: Renderer = render_terminal,
    ):
        self.diagnostics = diagnostics or Diagnostics()
        self.renderers: List[Renderer] = []
        for renderer in renderers:
            if not callable(renderer):
                self.diagnostics.error(RENDERER, f"Invalid renderer {renderer!r} is not callable and is ignored")
                continue
            self.renderers.append(renderer)
        self.renderers.extend(builtins)
        self.terminal = terminal

    async def run(self, request: RenderRequest) -> RenderStep:
        value = request.value
        for renderer in self.renderers:
            step = await self._call(renderer, request.with_value(value))
            if step.outcome is Outcome.STOP:
                return step
            if step.outcome is Outcome.CONTINUE and step.value is not None:
                value = step.value

        final = request.with_value(value)
        try:
            step = await self._invoke(self.terminal, final)
        except Exception:
            self.diagnostics.log.error(
                f"Terminal renderer failed at {node_path(request.element)}; an earlier renderer broke the chain",
                exc_info=True,
            )
            raise
        return step if step is not None else RenderStep.proceed(value)

    async def _call(self, renderer: Renderer, request: RenderRequest) -> RenderStep:
        try:
            step = await self._invoke(renderer, request)
        except Exception as e:
            self.diagnostics.error(
                RENDERER, f"Renderer {_name(renderer)} failed: {e}", path=node_path(request.element), exc_info=True
            )
            return RenderStep(Outcome.FAILED, request.value, e)
        if step is None:
            return RenderStep.proceed()
        if not isinstance(step, RenderStep):
            return RenderStep.proceed(step)
        return step

    @staticmethod
    async def _invoke(renderer: Renderer, request: RenderRequest) -> Optional[RenderStep]:
        step = renderer(request)
        if inspect.isawaitable(step):
            step = await step
        return step


__all__ = [
    "Outcome",
    "RenderStep",
    "RenderRequest",
    "Renderer",
    "BUILTIN_RENDERERS",
    "RendererChain",
    "render_date",
    "render_url",
    "render_form_control",
    "render_image",
    "render_text",
    "render_tree",
    "render_terminal",
]
