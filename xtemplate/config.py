"""
Render configuration.

``RenderConfig`` is passed explicitly into every render call; there is no
module-wide renderer registry. Configuration files are YAML:

    debug: false
    concurrency: 50
    log: myapp.templates
    renderers:
      - myapp.render:price_renderer
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from ruamel.yaml.error import YAMLError

from .engine.scheduler import DEFAULT_CONCURRENCY
from .errors import ConfigError
from .yaml_io import load_yaml


def _assert_only_keys(d: Dict[str, Any] | None, allowed: Iterable[str], *, ctx: str) -> None:
    if d is None:
        return
    allowed_set = set(allowed)
    extra = set(d.keys()) - allowed_set
    if extra:
        raise ValueError(f"{ctx}: unknown key(s): {', '.join(sorted(extra))}")


def resolve_renderer(ref: Any) -> Callable:
    """Accepts a callable or a ``"package.module:attribute"`` reference."""
    if callable(ref):
        return ref
    if not isinstance(ref, str) or ":" not in ref:
        raise ValueError(f"Renderer reference must be 'module:attribute', got: {ref!r}")
    module_name, _, attr_path = ref.partition(":")
    try:
        target: Any = importlib.import_module(module_name.strip())
    except ImportError as e:
        raise ValueError(f"Cannot import renderer module '{module_name}': {e}") from e
    for part in attr_path.strip().split("."):
        try:
            target = getattr(target, part)
        except AttributeError:
            raise ValueError(f"Renderer '{ref}' not found") from None
    if not callable(target):
        raise ValueError(f"Renderer '{ref}' is not callable")
    return target


@dataclass
class RenderConfig:
    """
    Настройки одного вызова рендеринга.

    Attributes:
        root: якорь для ``:root`` в селекторах (по умолчанию сами данные);
            внешняя область по-прежнему связана с данными
        renderers: пользовательские рендереры, выполняются раньше встроенных
        debug: без сжатия пробелов, с диагностическими комментариями
        log: логгер для диагностики движка
        concurrency: число одновременно обрабатываемых задач
    """
    root: Any = None
    renderers: List[Any] = field(default_factory=list)
    debug: bool = False
    log: Optional[logging.Logger] = None
    concurrency: int = DEFAULT_CONCURRENCY

    @staticmethod
    def from_dict(d: Dict[str, Any] | None) -> "RenderConfig":
        if not d:
            return RenderConfig()
        _assert_only_keys(d, ["root", "renderers", "debug", "log", "concurrency"], ctx="RenderConfig")

        renderers_raw = d.get("renderers") or []
        if not isinstance(renderers_raw, list):
            renderers_raw = [renderers_raw]
        renderers = [resolve_renderer(r) for r in renderers_raw]

        debug = d.get("debug", False)
        if not isinstance(debug, bool):
            raise TypeError("RenderConfig.debug must be a boolean")

        concurrency = d.get("concurrency", DEFAULT_CONCURRENCY)
        if isinstance(concurrency, bool) or not isinstance(concurrency, int) or concurrency < 1:
            raise ValueError(f"RenderConfig.concurrency must be a positive integer, got: {concurrency!r}")

        log_raw = d.get("log")
        if log_raw is None or isinstance(log_raw, logging.Logger):
            log = log_raw
        elif isinstance(log_raw, str):
            log = logging.getLogger(log_raw)
        else:
            raise TypeError("RenderConfig.log must be a logger name")

        return RenderConfig(
            root=d.get("root"),
            renderers=renderers,
            debug=debug,
            log=log,
            concurrency=concurrency,
        )


def load_render_config(path: Path) -> RenderConfig:
    """
    Reads a YAML configuration file.

    Raises:
        ConfigError: unreadable file, unknown keys or bad values
    """
    try:
        raw = load_yaml(path)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except (YAMLError, ValueError) as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if raw is not None and not isinstance(raw, dict):
        raise ConfigError(f"Config {path} must be a mapping")
    try:
        return RenderConfig.from_dict(raw)
    except (ValueError, TypeError) as e:
        raise ConfigError(f"{path}: {e}") from e


__all__ = ["RenderConfig", "load_render_config", "resolve_renderer"]
