# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple

from .config import DEFAULT_RENDER_CONFIG, RenderConfig
from .content import resolve
from .display import DisplayMeter, wrap
from .expansion import Row, RowExpander
from .formatter import ContentFormatter
from .structure import FieldSpec, leaf_count, structure_depth
from .widths import ColumnWidths, compute_widths

logger = logging.getLogger(__name__)

# no structure item can produce this key: field names may not contain ";"
LINE_NUMBER_KEY = "#;line"
LINE_NUMBER_FIELD = FieldSpec(field="#", path=("#",), label="#", key=LINE_NUMBER_KEY)
INVALID_TEXT = "<invalid line>"


# ============================================================
# Model
# ============================================================
@dataclass
class Cell:
    """Already formatted lines for one cell, covering ``span`` leaf columns."""

    lines: List[str]
    width: int
    align: str = "left"
    last: bool = False
    span: int = 1
    style: Tuple[str, ...] = ()

    @property
    def height(self) -> int:
        return len(self.lines)


@dataclass
class TableRow:
    cells: List[Cell]
    header: bool = False

    @property
    def height(self) -> int:
        return max((c.height for c in self.cells), default=1)


@dataclass
class TableModel:
    rows: List[TableRow] = field(default_factory=list)
    columns: int = 0

    @property
    def header_rows(self) -> List[TableRow]:
        return [r for r in self.rows if r.header]

    @property
    def data_rows(self) -> List[TableRow]:
        return [r for r in self.rows if not r.header]


def normalize_dataset(data: Any) -> List[Any]:
    """A bare object is a one-row dataset; any other non-list value is one (invalid) item."""
    if data is None:
        return []
    if isinstance(data, Mapping):
        return [data]
    if isinstance(data, (list, tuple)):
        return list(data)
    return [data]


# ============================================================
# Headers
# ============================================================
class HeaderBuilder:
    """One header row per nesting level.

    A label sits at the column of its first leaf and spans all of its leaves;
    positions below a shallower leaf stay blank.
    """

    def __init__(self, widths: ColumnWidths):
        self.widths = widths

    def build(self, fields: Sequence[FieldSpec]) -> List[TableRow]:
        rows: List[TableRow] = []
        for level in range(structure_depth(fields)):
            cells: List[Cell] = []
            self._cells_at(fields, level, 0, cells)
            if cells:
                cells[-1].last = True
            rows.append(TableRow(cells, header=True))
        return rows

    def _cells_at(self, fields: Sequence[FieldSpec], level: int, current: int, cells: List[Cell]) -> None:
        for spec in fields:
            slot = self.widths.slot(spec.key)
            if current == level:
                cells.append(Cell(wrap(spec.label, slot), slot, span=spec.leaf_count))
            elif spec.group:
                self._cells_at(spec.group, level, current + 1, cells)
            else:
                cells.append(Cell([""], slot))


# ============================================================
# Builder
# ============================================================
class TableBuilder:
    """Populate a TableModel from a dataset: widths, headers, expanded data rows.

    Object groups are split down to one cell per child so every value sits
    under its own leaf header; a grouped list stays one spanning cell with one
    line per element.
    """

    def __init__(
        self,
        fields: Sequence[FieldSpec],
        cfg: RenderConfig = DEFAULT_RENDER_CONFIG,
        meter: Optional[DisplayMeter] = None,
    ):
        self.fields = list(fields)
        self.cfg = cfg
        self.meter = meter or DisplayMeter()
        self.expander = RowExpander()

    def build(self, data: Any) -> TableModel:
        numbered = list(enumerate(normalize_dataset(data), start=1))
        fields = self.fields
        widths = compute_widths(fields, [item for _, item in numbered if isinstance(item, Mapping)], self.meter)
        if self.cfg.line_numbers and fields:
            fields = [LINE_NUMBER_FIELD, *fields]
            widths = widths.with_column(LINE_NUMBER_KEY, self._line_number_width(numbered))
        formatter = ContentFormatter(widths, self.meter, color=self.cfg.color)

        table = TableModel(columns=leaf_count(fields))
        if not fields:
            return table
        if self.cfg.include_headers:
            table.rows.extend(HeaderBuilder(widths).build(fields))

        for number, item in numbered:
            if not isinstance(item, Mapping):
                if not self.cfg.show_invalid:
                    logger.warning("skipping item %d: expected an object, got %s", number, type(item).__name__)
                    continue
                table.rows.append(self._invalid_row(number, fields, widths))
                continue
            for i, values in enumerate(self.expander.expand(item, self.fields)):
                if self.cfg.line_numbers:
                    values[LINE_NUMBER_KEY] = number if i == 0 else None
                table.rows.append(self._data_row(values, fields, widths, formatter))
        return table

    def _line_number_width(self, numbered: List[Tuple[int, Any]]) -> int:
        shown = [n for n, item in numbered if isinstance(item, Mapping) or self.cfg.show_invalid]
        return max([self.meter(LINE_NUMBER_FIELD.label)] + [len(str(n)) for n in shown])

    def _data_row(
        self,
        values: Row,
        fields: Sequence[FieldSpec],
        widths: ColumnWidths,
        formatter: ContentFormatter,
    ) -> TableRow:
        cells: List[Cell] = []
        for spec in fields:
            self._value_cells(values.get(spec.key), spec, widths, formatter, cells)
        cells[-1].last = True
        return TableRow(cells)

    def _value_cells(
        self,
        value: Any,
        spec: FieldSpec,
        widths: ColumnWidths,
        formatter: ContentFormatter,
        cells: List[Cell],
    ) -> None:
        if spec.group and isinstance(value, Mapping):
            for child in spec.group:
                self._value_cells(resolve(value, child), child, widths, formatter, cells)
            return
        cells.append(
            Cell(
                formatter.lines(value, spec),
                widths.slot(spec.key),
                align=formatter.alignment(value, spec),
                span=spec.leaf_count,
                style=() if spec.group else spec.properties.color,
            )
        )

    def _invalid_row(self, number: int, fields: Sequence[FieldSpec], widths: ColumnWidths) -> TableRow:
        cells: List[Cell] = []
        rest = list(fields)
        if self.cfg.line_numbers:
            cells.append(Cell([str(number)], widths.slot(LINE_NUMBER_KEY), align="right"))
            rest = rest[1:]
        cells.append(
            Cell(
                [INVALID_TEXT],
                widths.span(rest),
                last=True,
                span=max(leaf_count(rest), 1),
                style=self.cfg.invalid_style,
            )
        )
        return TableRow(cells)
