"""
Diagnostics collected during one render.

Recoverable failures (bad selectors, missing variables, failing renderers,
structural problems, crashed tasks) are logged and kept as ``Problem``
records so the caller can inspect them on ``RenderResult.problems``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)

SELECTOR = "selector"
VARIABLE = "variable"
RENDERER = "renderer"
STRUCTURE = "structure"
TASK = "task"


@dataclass(frozen=True)
class Problem:
    kind: str
    message: str
    path: Optional[str] = None

    def __str__(self) -> str:
        where = f" at {self.path}" if self.path else ""
        return f"[{self.kind}] {self.message}{where}"


class Diagnostics:
    """Problem sink bound to a logger (``RenderConfig.log`` or the module logger)."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger
        self.problems: List[Problem] = []

    def error(self, kind: str, message: str, *, path: Optional[str] = None, exc_info: bool = False) -> None:
        problem = Problem(kind, message, path)
        self.problems.append(problem)
        self.log.error(str(problem), exc_info=exc_info)

    def warning(self, kind: str, message: str, *, path: Optional[str] = None) -> None:
        problem = Problem(kind, message, path)
        self.problems.append(problem)
        self.log.warning(str(problem))

    def debug(self, message: str) -> None:
        self.log.debug(message)


__all__ = ["Problem", "Diagnostics", "SELECTOR", "VARIABLE", "RENDERER", "STRUCTURE", "TASK"]
