from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from ruamel.yaml.error import YAMLError

from .config import RenderConfig, load_render_config
from .dom.markup import load_html, serialize
from .dom.nodes import is_tree_node
from .errors import XTemplateUserError
from .render import render
from .select import SelectorEvaluationError, SelectorSyntaxError, select
from .version import tool_version
from .yaml_io import load_yaml

DATA_FORMATS = ("auto", "json", "yaml", "html")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="xtemplate",
        description="Merge JSON/YAML/HTML data into HTML templates annotated with data-* directives",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_data_format(sp: argparse.ArgumentParser) -> None:
        sp.add_argument(
            "--data-format",
            choices=DATA_FORMATS,
            default="auto",
            help="формат файла данных (auto: по расширению)",
        )

    sp_render = sub.add_parser("render", help="Отрендерить шаблон с данными")
    sp_render.add_argument("template", type=Path, help="HTML-шаблон")
    sp_render.add_argument("data", type=Path, help="данные: .json, .yaml/.yml или .html")
    add_data_format(sp_render)
    sp_render.add_argument("--config", type=Path, help="YAML-файл с настройками рендеринга")
    sp_render.add_argument("--debug", action="store_true", help="без сжатия пробелов, с отладочными комментариями")
    sp_render.add_argument("--concurrency", type=int, help="число одновременно обрабатываемых узлов")
    sp_render.add_argument("-o", "--output", type=Path, help="куда записать результат (по умолчанию stdout)")

    sp_select = sub.add_parser("select", help="Выполнить селектор над данными (JSON-вывод)")
    sp_select.add_argument("data", type=Path, help="данные: .json, .yaml/.yml или .html")
    sp_select.add_argument("selector", help="селекторное выражение")
    add_data_format(sp_select)
    sp_select.add_argument("--self", dest="self_match", action="store_true", help="разрешить совпадение с корнем данных")

    return p


def _detect_format(path: Path, fmt: str) -> str:
    if fmt != "auto":
        return fmt
    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return "yaml"
    if suffix in (".html", ".htm", ".xhtml"):
        return "html"
    return "json"


def load_data(path: Path, fmt: str = "auto") -> Any:
    """Загружает данные рендеринга из файла."""
    if not path.exists():
        raise ValueError(f"Data file not found: {path}")
    kind = _detect_format(path, fmt)
    try:
        if kind == "html":
            return load_html(path)
        if kind == "yaml":
            return load_yaml(path)
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ValueError(f"Failed to read data file {path}: {e}")
    except (ValueError, YAMLError) as e:
        raise ValueError(f"Invalid {kind} data in {path}: {e}")


def _render_config(ns: argparse.Namespace) -> RenderConfig:
    cfg = load_render_config(ns.config) if ns.config else RenderConfig()
    if ns.debug:
        cfg.debug = True
    if ns.concurrency is not None:
        if ns.concurrency < 1:
            raise ValueError("--concurrency must be positive")
        cfg.concurrency = ns.concurrency
    return cfg


def _run_render(ns: argparse.Namespace) -> int:
    if not ns.template.exists():
        raise ValueError(f"Template not found: {ns.template}")
    template = load_html(ns.template)
    data = load_data(ns.data, ns.data_format)
    cfg = _render_config(ns)

    result = render(template, data, cfg)
    if result.error is not None:
        raise result.error

    text = serialize(result.element)
    if ns.output:
        ns.output.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)
    return 0


def _jsonable(value: Any) -> Any:
    if is_tree_node(value):
        return str(value)
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


def _run_select(ns: argparse.Namespace) -> int:
    data = load_data(ns.data, ns.data_format)
    try:
        result = select(data, ns.selector, self_match=ns.self_match)
    except (SelectorSyntaxError, SelectorEvaluationError) as e:
        raise ValueError(str(e))
    payload = [
        {"path": m.location.describe(), "value": _jsonable(m.value)}
        for m in result
    ]
    sys.stdout.write(json.dumps(payload, ensure_ascii=False, indent=2) + "\n")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    ns = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    try:
        if ns.cmd == "render":
            return _run_render(ns)
        if ns.cmd == "select":
            return _run_select(ns)
    except XTemplateUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
