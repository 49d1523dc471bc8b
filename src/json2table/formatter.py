# -*- coding: utf-8 -*-
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, List, Optional, Union

from .content import ContentKind, classify, default_alignment, plain_text, resolve
from .display import DisplayMeter, pad, rstrip_visible, split_lines, truncate, wrap
from .structure import FieldSpec
from .styles import stylize
from .widths import GUTTER, ColumnWidths


class ContentFormatter:
    """Turn a value into display lines for one field.

    Leaves honour ``width`` / ``truncate``; groups lay their children out side
    by side, each child padded to its slot and separated by the gutter. A
    grouped list yields one line per element.
    """

    def __init__(self, widths: ColumnWidths, meter: Optional[DisplayMeter] = None, color: bool = True):
        self.widths = widths
        self.meter = meter or DisplayMeter()
        self.color = color

    def format(self, value: Any, spec: FieldSpec) -> Union[str, List[str]]:
        out = self.lines(value, spec)
        return out[0] if len(out) == 1 else out

    def lines(self, value: Any, spec: FieldSpec) -> List[str]:
        if spec.group:
            return self._group_lines(value, spec)
        return self._leaf_lines(value, spec)

    def alignment(self, value: Any, spec: FieldSpec) -> str:
        if spec.properties.align:
            return spec.properties.align
        if spec.group:
            return "left"
        return default_alignment(value)

    # ---------- leaves ----------
    def _leaf_lines(self, value: Any, spec: FieldSpec) -> List[str]:
        text = plain_text(value)
        width = spec.properties.width
        if width is None:
            return split_lines(text)
        if spec.properties.truncate:
            return [truncate(line, width) for line in split_lines(text)]
        return wrap(text, width)

    # ---------- groups ----------
    def _group_lines(self, value: Any, spec: FieldSpec) -> List[str]:
        kind = classify(value)
        if kind is ContentKind.STRUCT:
            return self._combine(value, spec)
        if kind is ContentKind.LIST:
            out: List[str] = []
            for element in value:
                if isinstance(element, Mapping):
                    out.extend(self._combine(element, spec))
                else:
                    out.extend(split_lines(plain_text(element)))
            return out or [""]
        return split_lines(plain_text(value))

    def _combine(self, obj: Mapping, spec: FieldSpec) -> List[str]:
        children = spec.group or ()
        values = [resolve(obj, child) for child in children]
        blocks = [self._child_lines(v, child) for v, child in zip(values, children)]
        height = max((len(b) for b in blocks), default=1)

        out: List[str] = []
        last = len(children) - 1
        for i in range(height):
            parts = []
            for j, child in enumerate(children):
                text = blocks[j][i] if i < len(blocks[j]) else ""
                parts.append(
                    pad(
                        text,
                        self.widths.slot(child.key),
                        self.alignment(values[j], child),
                        trailing=j != last,
                        meter=self.meter,
                    )
                )
            out.append(rstrip_visible((" " * GUTTER).join(parts)))
        return out

    def _child_lines(self, value: Any, spec: FieldSpec) -> List[str]:
        out = self.lines(value, spec)
        if self.color and spec.properties.color and not spec.group:
            out = [stylize(line, spec.properties.color) for line in out]
        return out
