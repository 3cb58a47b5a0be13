"""
Value formatting used by renderers and by the selector ``:contains``/``:val``
pseudo-classes.

Text conversion follows the browser convention the templates were written
against: ``true``/``false`` for booleans and integral floats without ``.0``.
Dates are rendered with a short per-language pattern table.
"""

from __future__ import annotations

import datetime as _dt
import math
import re
from typing import Any, Optional

from .dom.nodes import is_tree_node, text_content

DEFAULT_LOCALE = "en"

# Языковой тег (в нижнем регистре) → strftime-шаблон
DATE_PATTERNS = {
    "en": "%m/%d/%Y",
    "en-us": "%m/%d/%Y",
    "en-gb": "%d/%m/%Y",
    "de": "%d.%m.%Y",
    "ru": "%d.%m.%Y",
    "fr": "%d/%m/%Y",
    "es": "%d/%m/%Y",
    "it": "%d/%m/%Y",
    "nl": "%d-%m-%Y",
    "ja": "%Y/%m/%d",
    "zh": "%Y/%m/%d",
}

_DATE_STRING_RE = re.compile(
    r"^\s*(?P<year>\d{4})[-./](?P<month>\d{1,2})[-./](?P<day>\d{1,2})"
    r"(?:[T ][0-9:.,]+(?:Z|[+-]\d{2}:?\d{2})?)?\s*$"
)


def format_value(value: Any) -> str:
    """Converts a data value to text the way a browser would concatenate it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return value
    if is_tree_node(value):
        return text_content(value)
    if isinstance(value, (list, tuple)):
        return ",".join("" if v is None else format_value(v) for v in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def is_primitive(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


def parse_date(value: Any) -> Optional[_dt.date]:
    """
    Interprets a data value as a calendar date.

    Accepts ``datetime``/``date`` objects, epoch milliseconds (UTC) and
    ``YYYY-MM-DD``, ``YYYY.MM.DD``, ``YYYY/MM/DD`` or ISO timestamp strings.
    Returns None for anything else.
    """
    if isinstance(value, _dt.datetime):
        return value.date()
    if isinstance(value, _dt.date):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return _dt.datetime.fromtimestamp(value / 1000.0, tz=_dt.timezone.utc).date()
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        m = _DATE_STRING_RE.match(value)
        if not m:
            return None
        try:
            return _dt.date(int(m.group("year")), int(m.group("month")), int(m.group("day")))
        except ValueError:
            return None
    return None


def date_pattern(locale: Optional[str]) -> str:
    if not locale:
        return DATE_PATTERNS[DEFAULT_LOCALE]
    tag = locale.strip().lower().replace("_", "-")
    if tag in DATE_PATTERNS:
        return DATE_PATTERNS[tag]
    return DATE_PATTERNS.get(tag.split("-", 1)[0], DATE_PATTERNS[DEFAULT_LOCALE])


def format_date(value: Any, locale: Optional[str] = None) -> Optional[str]:
    """Formats a date-like value for ``locale``; None when the value is not a date."""
    day = parse_date(value)
    if day is None:
        return None
    return day.strftime(date_pattern(locale))


__all__ = [
    "DEFAULT_LOCALE",
    "DATE_PATTERNS",
    "format_value",
    "is_primitive",
    "parse_date",
    "date_pattern",
    "format_date",
]
