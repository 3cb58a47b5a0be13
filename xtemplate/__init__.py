"""
xtemplate: merges JSON-like data or a second markup tree into an HTML template
annotated with ``data-*`` directives.
"""

from __future__ import annotations

from .config import RenderConfig, load_render_config
from .dom.markup import parse_html, serialize
from .engine.diagnostics import Problem
from .engine.renderers import Outcome, RenderRequest, RenderStep
from .errors import ConfigError, TemplateSetupError, XTemplateUserError
from .render import RenderResult, render, render_async
from .select import ResultSet, SelectorSyntaxError, select

__all__ = [
    "render",
    "render_async",
    "RenderResult",
    "RenderConfig",
    "load_render_config",
    "Problem",
    "Outcome",
    "RenderRequest",
    "RenderStep",
    "parse_html",
    "serialize",
    "select",
    "ResultSet",
    "SelectorSyntaxError",
    "XTemplateUserError",
    "ConfigError",
    "TemplateSetupError",
]
