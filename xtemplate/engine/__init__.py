"""
Движок слияния шаблона и данных.
"""

from __future__ import annotations

from .bookkeeping import NodeTable
from .diagnostics import Diagnostics, Problem
from .directives import DirectiveProcessor
from .renderers import (
    BUILTIN_RENDERERS,
    Outcome,
    RenderRequest,
    RenderStep,
    Renderer,
    RendererChain,
)
from .scheduler import DEFAULT_CONCURRENCY, Task, TaskQueue
from .scope import Scope
from .session import RenderSession

__all__ = [
    "NodeTable",
    "Diagnostics",
    "Problem",
    "DirectiveProcessor",
    "BUILTIN_RENDERERS",
    "Outcome",
    "RenderRequest",
    "RenderStep",
    "Renderer",
    "RendererChain",
    "DEFAULT_CONCURRENCY",
    "Task",
    "TaskQueue",
    "Scope",
    "RenderSession",
]
