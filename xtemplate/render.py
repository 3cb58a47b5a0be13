"""
Public entry points: ``render`` and ``render_async``.

Only a setup failure is reported through ``RenderResult.error``; every other
problem degrades the affected fragment and is listed in ``problems``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

from .config import RenderConfig
from .dom.documents import DocumentCloneCache
from .dom.markup import parse_html
from .engine.diagnostics import Problem
from .engine.session import RenderSession
from .errors import ConfigError, TemplateSetupError, XTemplateUserError

logger = logging.getLogger(__name__)

ConfigLike = Union[RenderConfig, Dict[str, Any], None]


@dataclass
class RenderResult:
    error: Optional[XTemplateUserError]
    element: Any
    problems: List[Problem] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    def __iter__(self) -> Iterator[Any]:
        # error, element = render(...)
        yield self.error
        yield self.element


def _coerce_config(config: ConfigLike) -> RenderConfig:
    if config is None:
        return RenderConfig()
    if isinstance(config, RenderConfig):
        return config
    try:
        return RenderConfig.from_dict(config)
    except (ValueError, TypeError) as e:
        raise ConfigError(str(e)) from e


async def render_async(
    element: Any,
    data: Any,
    config: ConfigLike = None,
    *,
    clone_cache: Optional[DocumentCloneCache] = None,
) -> RenderResult:
    """
    Merges ``data`` into the template ``element`` in place.

    Args:
        element: template root (bs4 document or element); markup text is parsed first
        data: JSON-like value or a bs4 tree
        config: ``RenderConfig`` or a dict accepted by ``RenderConfig.from_dict``
        clone_cache: cache of pristine document copies (process-wide by default)
    """
    try:
        cfg = _coerce_config(config)
    except ConfigError as e:
        logger.error(f"Invalid render configuration: {e}")
        return RenderResult(e, element)

    if element is None:
        return RenderResult(None, None)
    if isinstance(element, (str, bytes)):
        element = parse_html(element)

    session = RenderSession(cfg, clone_cache)
    try:
        await session.run(element, data)
    except TemplateSetupError as e:
        return RenderResult(e, element, session.diagnostics.problems)
    return RenderResult(None, element, session.diagnostics.problems)


def render(element: Any, data: Any, config: ConfigLike = None, **kwargs: Any) -> RenderResult:
    """Synchronous wrapper around ``render_async`` (must not be called from a running event loop)."""
    return asyncio.run(render_async(element, data, config, **kwargs))


__all__ = ["RenderResult", "render", "render_async"]
