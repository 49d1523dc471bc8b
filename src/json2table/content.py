# -*- coding: utf-8 -*-
"""Value classification, extraction and plain-text rendering.

Every runtime value falls into exactly one ``ContentKind``. Width measuring and
cell formatting both start from ``plain_text`` so that a column is always at
least as wide as what ends up printed in it.
"""
from __future__ import annotations

import datetime as _dt
import logging
import re
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence

from .display import strip_ansi
from .errors import ExtractionMiss, UnformattableValue
from .structure import FieldSpec

logger = logging.getLogger(__name__)

PLACEHOLDER = "[object]"
LIST_SEPARATOR = ", "

_NUMERIC_RE = re.compile(r"^[-+]?\d+(\.\d+)?$")


class ContentKind(str, Enum):
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    TEXT = "text"
    LIST = "list"
    STRUCT = "struct"


def classify(value: Any) -> ContentKind:
    if value is None:
        return ContentKind.NULL
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return ContentKind.BOOL
    if isinstance(value, (int, float, Decimal)):
        return ContentKind.NUMBER
    if isinstance(value, Mapping):
        return ContentKind.STRUCT
    if isinstance(value, (list, tuple)):
        return ContentKind.LIST
    return ContentKind.TEXT


def looks_numeric(text: str) -> bool:
    return bool(_NUMERIC_RE.match(strip_ansi(text).strip()))


def default_alignment(value: Any) -> str:
    kind = classify(value)
    if kind is ContentKind.NUMBER:
        return "right"
    if kind is ContentKind.TEXT and looks_numeric(_text(value)):
        return "right"
    return "left"


# ============================================================
# Plain text
# ============================================================
def _number(value: Any) -> str:
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return str(value)


def _text(value: Any) -> str:
    if isinstance(value, (_dt.datetime, _dt.date, _dt.time)):
        return value.isoformat()
    return str(value)


def _flatten_struct(value: Mapping) -> str:
    parts = []
    for k, v in value.items():
        if classify(v) in (ContentKind.STRUCT, ContentKind.LIST):
            raise UnformattableValue(f"nested value under {k!r}")
        parts.append(f"{k}: {plain_text(v)}")
    return LIST_SEPARATOR.join(parts)


def _struct(value: Mapping) -> str:
    try:
        return _flatten_struct(value)
    except UnformattableValue:
        return PLACEHOLDER


def _list(value: Sequence) -> str:
    return LIST_SEPARATOR.join(plain_text(item) for item in value)


_PLAIN: Dict[ContentKind, Callable[[Any], str]] = {
    ContentKind.NULL: lambda value: "",
    ContentKind.BOOL: lambda value: "true" if value else "false",
    ContentKind.NUMBER: _number,
    ContentKind.TEXT: _text,
    ContentKind.LIST: _list,
    ContentKind.STRUCT: _struct,
}


def plain_text(value: Any) -> str:
    """Single-value rendering with no group spec, width or alignment applied."""
    return _PLAIN[classify(value)](value)


# ============================================================
# Extraction
# ============================================================
def extract(data: Any, path: Sequence[str]) -> Any:
    """Follow *path* through nested mappings (and list indices); raise ExtractionMiss."""
    current = data
    for segment in path:
        if isinstance(current, Mapping):
            if segment not in current:
                raise ExtractionMiss(path, segment)
            current = current[segment]
        elif isinstance(current, (list, tuple)) and segment.isascii() and segment.isdigit():
            index = int(segment)
            if index >= len(current):
                raise ExtractionMiss(path, segment)
            current = current[index]
        else:
            raise ExtractionMiss(path, segment)
    return current


def resolve(data: Any, spec: FieldSpec) -> Optional[Any]:
    """Value of *spec* in *data*, or None when the path does not resolve."""
    try:
        value = extract(data, spec.path)
        if spec.alt_path:
            value = extract(value, spec.alt_path)
    except ExtractionMiss as e:
        logger.debug("field %s: %s", spec.key, e)
        return None
    return value
