from __future__ import annotations

from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

# safe-загрузчик: обычные dict/list, даты YAML превращаются в datetime.date
_YAML_SAFE = YAML(typ="safe", pure=True)


def load_yaml_text(text: str) -> Any:
    return _YAML_SAFE.load(text)


def load_yaml(path: Path) -> Any:
    """Загружает YAML-файл; пустой файл даёт None."""
    return load_yaml_text(path.read_text(encoding="utf-8"))


__all__ = ["load_yaml", "load_yaml_text"]
