# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import StructureSyntaxError
from .paths import join_path, split_path

logger = logging.getLogger(__name__)

_OPENERS = {"[": "]", "(": ")", "{": "}"}
_CLOSERS = {"]": "[", ")": "(", "}": "{"}
_QUOTES = ("'", '"')
_LABEL_RESERVED = set(",:;()[]{}'\"")
KEY_SEPARATOR = "/"


# ============================================================
# Model
# ============================================================
class FieldProperties(BaseModel):
    """Per-field options from a ``{...}`` block.

    Unrecognized keys are kept as extras (``model_extra``) and otherwise ignored.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    width: Optional[int] = Field(default=None, gt=0)
    truncate: bool = False
    color: Tuple[str, ...] = ()
    align: Optional[Literal["left", "right", "center"]] = None

    @field_validator("color", mode="before")
    @classmethod
    def _color_list(cls, v: Any) -> Any:
        if isinstance(v, str):
            return tuple(v.split())
        return v

    @field_validator("align", mode="before")
    @classmethod
    def _align_lower(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def extras(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class FieldSpec(BaseModel):
    """One parsed structure item: a leaf column or a group of columns."""

    model_config = ConfigDict(frozen=True)

    field: str
    path: Tuple[str, ...]
    alt_path: Optional[Tuple[str, ...]] = None
    label: str
    key: str
    group: Optional[Tuple["FieldSpec", ...]] = None
    properties: FieldProperties = Field(default_factory=FieldProperties)

    @field_validator("group")
    @classmethod
    def _non_empty_group(cls, v: Optional[Tuple["FieldSpec", ...]]) -> Optional[Tuple["FieldSpec", ...]]:
        if v is not None and len(v) == 0:
            raise ValueError("a group needs at least one child field")
        return v

    @property
    def is_group(self) -> bool:
        return self.group is not None

    @property
    def depth(self) -> int:
        if not self.group:
            return 1
        return 1 + max(child.depth for child in self.group)

    @property
    def leaf_count(self) -> int:
        if not self.group:
            return 1
        return sum(child.leaf_count for child in self.group)

    def leaves(self) -> List["FieldSpec"]:
        if not self.group:
            return [self]
        out: List[FieldSpec] = []
        for child in self.group:
            out.extend(child.leaves())
        return out


FieldSpec.model_rebuild()


def structure_depth(fields: Sequence[FieldSpec]) -> int:
    """Header depth: the number of header rows *fields* need."""
    return max((f.depth for f in fields), default=0)


def leaf_count(fields: Sequence[FieldSpec]) -> int:
    return sum(f.leaf_count for f in fields)


def make_key(parent_key: str, field: str, label: str, default_label: str, alt_path: Optional[Sequence[str]] = None) -> str:
    base = field
    if alt_path:
        base += f"({join_path(alt_path)})"
    if label != default_label:
        base += f":{label}"
    return f"{parent_key}{KEY_SEPARATOR}{base}" if parent_key else base


# ============================================================
# Parser
# ============================================================
class StructureParser:
    """Recursive-descent parser for the structure mini-language.

    ``items := item (',' item)*``
    ``item  := field (':' label)? ('(' altPath ')')? ('[' items ']')? ('{' properties '}')?``

    Commas only separate items at bracket depth 0 and outside quoted labels.
    """

    def parse(self, text: Optional[str]) -> List[FieldSpec]:
        if text is None or not text.strip():
            return []
        return self._parse_items(text, parent_key="")

    # ---------- items ----------
    def _parse_items(self, text: str, parent_key: str) -> List[FieldSpec]:
        return [self._parse_item(item, parent_key) for item in self._split_items(text)]

    def _split_items(self, text: str) -> List[str]:
        items: List[str] = []
        stack: List[str] = []
        start = 0
        i = 0
        while i < len(text):
            ch = text[i]
            if ch in _QUOTES and _opens_quote(text, i):
                i = self._skip_quote(text, i)
                continue
            if ch in _OPENERS:
                stack.append(ch)
            elif ch in _CLOSERS:
                if not stack or stack[-1] != _CLOSERS[ch]:
                    raise StructureSyntaxError(f"unbalanced {ch!r}", text)
                stack.pop()
            elif ch == "," and not stack:
                items.append(text[start:i])
                start = i + 1
            i += 1
        if stack:
            raise StructureSyntaxError(f"unclosed {stack[-1]!r}", text)
        items.append(text[start:])

        for item in items:
            if not item.strip():
                raise StructureSyntaxError("empty structure item", text)
        return [item.strip() for item in items]

    def _parse_item(self, item: str, parent_key: str) -> FieldSpec:
        n = len(item)
        pos = 0
        while pos < n and item[pos] not in ":([{":
            if item[pos] in _CLOSERS or item[pos] == ";" or item[pos] in _QUOTES:
                raise StructureSyntaxError(f"unexpected {item[pos]!r} in field name", item)
            pos += 1
        field = item[:pos].strip()
        if not field:
            raise StructureSyntaxError("missing field name", item)
        path = tuple(split_path(field))

        label: Optional[str] = None
        if pos < n and item[pos] == ":":
            label, pos = self._read_label(item, pos + 1)
        pos = _skip_ws(item, pos)

        alt_path: Optional[Tuple[str, ...]] = None
        if pos < n and item[pos] == "(":
            body, pos = self._read_block(item, pos)
            if not body.strip():
                raise StructureSyntaxError("empty alternate path", item)
            alt_path = tuple(split_path(body.strip()))
            pos = _skip_ws(item, pos)

        default_label = path[-1]
        if label is None:
            label = default_label
        key = make_key(parent_key, field, label, default_label, alt_path)

        group: Optional[Tuple[FieldSpec, ...]] = None
        if pos < n and item[pos] == "[":
            body, pos = self._read_block(item, pos)
            if not body.strip():
                raise StructureSyntaxError("empty group", item)
            group = tuple(self._parse_items(body, parent_key=key))
            pos = _skip_ws(item, pos)

        properties = FieldProperties()
        if pos < n and item[pos] == "{":
            body, pos = self._read_block(item, pos)
            properties = self._parse_properties(body, item)
            pos = _skip_ws(item, pos)

        if pos < n:
            raise StructureSyntaxError(f"unexpected text {item[pos:]!r} after item", item)

        return FieldSpec(
            field=field,
            path=path,
            alt_path=alt_path,
            label=label,
            key=key,
            group=group,
            properties=properties,
        )

    # ---------- pieces ----------
    def _read_label(self, item: str, pos: int) -> Tuple[str, int]:
        pos = _skip_ws(item, pos)
        if pos < len(item) and item[pos] in _QUOTES:
            end = self._skip_quote(item, pos)
            label = item[pos + 1 : end - 1]
            if not label:
                raise StructureSyntaxError("empty label", item)
            return label, end
        start = pos
        while pos < len(item) and item[pos] not in "([{":
            if item[pos] in _CLOSERS:
                raise StructureSyntaxError(f"unexpected {item[pos]!r} in label", item)
            pos += 1
        label = item[start:pos].strip()
        if not label:
            raise StructureSyntaxError("empty label", item)
        return label, pos

    def _read_block(self, item: str, pos: int) -> Tuple[str, int]:
        """Return the body of the bracket block opening at *pos* and the index after it."""
        stack: List[str] = []
        i = pos
        while i < len(item):
            ch = item[i]
            if ch in _QUOTES and _opens_quote(item, i):
                i = self._skip_quote(item, i)
                continue
            if ch in _OPENERS:
                stack.append(ch)
            elif ch in _CLOSERS:
                if not stack or stack[-1] != _CLOSERS[ch]:
                    raise StructureSyntaxError(f"unbalanced {ch!r}", item)
                stack.pop()
                if not stack:
                    return item[pos + 1 : i], i + 1
            i += 1
        raise StructureSyntaxError(f"unclosed {item[pos]!r}", item)

    def _skip_quote(self, text: str, pos: int) -> int:
        quote = text[pos]
        end = text.find(quote, pos + 1)
        if end < 0:
            raise StructureSyntaxError("unterminated quote", text[pos:])
        return end + 1

    def _parse_properties(self, body: str, item: str) -> FieldProperties:
        raw: Dict[str, Any] = {}
        for part in body.split(";"):
            if not part.strip():
                continue
            if ":" not in part:
                raise StructureSyntaxError("property needs 'key:value'", part.strip())
            key, value = part.split(":", 1)
            key = key.strip().lower()
            if not key:
                raise StructureSyntaxError("property without a name", part.strip())
            value = _unquote(value.strip())
            if "," in value:
                raw[key] = tuple(v.strip() for v in value.split(",") if v.strip())
            else:
                raw[key] = value

        try:
            properties = FieldProperties.model_validate(raw)
        except ValidationError as e:
            first = e.errors()[0]
            where = ".".join(str(loc) for loc in first.get("loc", ()))
            raise StructureSyntaxError(f"invalid property {where} ({first['msg']})", body) from e
        if properties.extras:
            logger.debug("unrecognized properties %s in %r", sorted(properties.extras), item)
        return properties


def _skip_ws(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def _opens_quote(text: str, pos: int) -> bool:
    """A quote only starts a quoted run right after ':' (a label or property value)."""
    j = pos - 1
    while j >= 0 and text[j].isspace():
        j -= 1
    return j >= 0 and text[j] == ":"


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return value[1:-1]
    return value


def parse_structure(text: Optional[str]) -> List[FieldSpec]:
    return StructureParser().parse(text)


# ============================================================
# Serializer
# ============================================================
def format_structure(fields: Sequence[FieldSpec]) -> str:
    """Pretty-print a FieldSpec tree back into canonical structure text."""
    return ",".join(_format_item(f) for f in fields)


def _format_item(spec: FieldSpec) -> str:
    out = spec.field
    if spec.label != spec.path[-1]:
        out += ":" + _quote_label(spec.label)
    if spec.alt_path:
        out += f"({join_path(spec.alt_path)})"
    if spec.group:
        out += f"[{format_structure(spec.group)}]"
    props = _format_properties(spec.properties)
    if props:
        out += "{" + props + "}"
    return out


def _quote_label(label: str) -> str:
    if label != label.strip() or any(ch in _LABEL_RESERVED for ch in label):
        quote = "'" if '"' in label else '"'
        return f"{quote}{label}{quote}"
    return label


def _format_properties(props: FieldProperties) -> str:
    parts: List[str] = []
    if props.width is not None:
        parts.append(f"width:{props.width}")
    if props.truncate:
        parts.append("truncate:true")
    if props.color:
        parts.append("color:" + ",".join(props.color))
    if props.align:
        parts.append(f"align:{props.align}")
    for key, value in props.extras.items():
        if isinstance(value, (tuple, list)):
            value = ",".join(str(v) for v in value)
        parts.append(f"{key}:{value}")
    return ";".join(parts)
