# -*- coding: utf-8 -*-
from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Optional, Sequence

from .content import plain_text, resolve
from .display import DisplayMeter
from .structure import FieldSpec

# spaces between two rendered columns
GUTTER = 2


class WidthControl:
    """Non-decreasing column width. A fixed width never grows."""

    def __init__(self, seed: int = 0, fixed: Optional[int] = None):
        self.fixed = fixed
        self._value = fixed if fixed is not None else seed

    def add(self, value: int) -> None:
        if self.fixed is None and value > self._value:
            self._value = value

    @property
    def value(self) -> int:
        return self._value


class ColumnWidths(Mapping):
    """Immutable ``key -> width`` table plus the layout slot of every field.

    A slot equals the width, except for the last child of a group whose own
    width exceeds its children: that child absorbs the difference so each
    header level spans exactly the width of the level above.
    """

    def __init__(self, widths: Dict[str, int], slots: Optional[Dict[str, int]] = None):
        self._widths = MappingProxyType(dict(widths))
        self._slots = MappingProxyType(dict(slots or {}))

    def __getitem__(self, key: str) -> int:
        return self._widths[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._widths)

    def __len__(self) -> int:
        return len(self._widths)

    def slot(self, key: str) -> int:
        return self._slots.get(key, self._widths[key])

    def span(self, fields: Sequence[FieldSpec]) -> int:
        """Width covered by *fields* laid out side by side."""
        if not fields:
            return 0
        return sum(self.slot(f.key) for f in fields) + GUTTER * (len(fields) - 1)

    def with_column(self, key: str, width: int) -> "ColumnWidths":
        """Copy with one extra standalone column."""
        return ColumnWidths({**self._widths, key: width}, {**self._slots, key: width})

    def __repr__(self) -> str:
        return f"ColumnWidths({dict(self._widths)!r})"


class WidthCalculator:
    """Fold the display length of every value into one control per field."""

    def __init__(self, meter: Optional[DisplayMeter] = None):
        self.meter = meter or DisplayMeter()

    def compute(self, fields: Sequence[FieldSpec], dataset: Iterable[Any]) -> ColumnWidths:
        controls: Dict[str, WidthControl] = {}
        self._seed(fields, controls)
        for item in dataset:
            if isinstance(item, Mapping):
                self._walk(fields, item, controls)

        widths: Dict[str, int] = {}
        self._finalize(fields, controls, widths)
        slots: Dict[str, int] = {}
        self._layout(fields, widths, slots, None)
        return ColumnWidths(widths, slots)

    def measure(self, value: Any) -> int:
        return self.meter(plain_text(value))

    def _seed(self, fields: Sequence[FieldSpec], controls: Dict[str, WidthControl]) -> None:
        for spec in fields:
            if spec.key not in controls:
                controls[spec.key] = WidthControl(seed=self.meter(spec.label), fixed=spec.properties.width)
            if spec.group:
                self._seed(spec.group, controls)

    def _walk(self, fields: Sequence[FieldSpec], item: Mapping, controls: Dict[str, WidthControl]) -> None:
        for spec in fields:
            value = resolve(item, spec)
            if spec.group:
                self._walk_group(spec, value, controls)
            else:
                controls[spec.key].add(self.measure(value))

    def _walk_group(self, spec: FieldSpec, value: Any, controls: Dict[str, WidthControl]) -> None:
        if isinstance(value, Mapping):
            self._walk(spec.group, value, controls)
        elif isinstance(value, (list, tuple)):
            for element in value:
                if isinstance(element, Mapping):
                    self._walk(spec.group, element, controls)
                elif element is not None:
                    # rendered as a plain line across the whole group
                    controls[spec.key].add(self.measure(element))
        elif value is not None:
            controls[spec.key].add(self.measure(value))

    def _finalize(self, fields: Sequence[FieldSpec], controls: Dict[str, WidthControl], widths: Dict[str, int]) -> None:
        for spec in fields:
            own = controls[spec.key].value
            if spec.group:
                self._finalize(spec.group, controls, widths)
                children = sum(widths[c.key] for c in spec.group) + GUTTER * (len(spec.group) - 1)
                own = max(own, children)
            # a leaf and a group may share a key; both get the wider value
            widths[spec.key] = max(widths.get(spec.key, 0), own)

    def _layout(
        self,
        fields: Sequence[FieldSpec],
        widths: Dict[str, int],
        slots: Dict[str, int],
        available: Optional[int],
    ) -> None:
        natural = sum(widths[f.key] for f in fields) + GUTTER * (len(fields) - 1)
        slack = max(0, available - natural) if available is not None else 0
        for i, spec in enumerate(fields):
            slot = widths[spec.key] + (slack if i == len(fields) - 1 else 0)
            slots[spec.key] = slot
            if spec.group:
                self._layout(spec.group, widths, slots, slot)


def compute_widths(
    fields: Sequence[FieldSpec],
    dataset: Iterable[Any],
    meter: Optional[DisplayMeter] = None,
) -> ColumnWidths:
    return WidthCalculator(meter).compute(fields, dataset)
