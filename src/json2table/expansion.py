# -*- coding: utf-8 -*-
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, List, Sequence

from .content import resolve
from .structure import FieldSpec

Row = Dict[str, Any]


class RowExpander:
    """Turn one data item into the physical rows it occupies.

    The longest list under any grouped field decides the row count (at least
    one). Row ``i`` carries element ``i`` of every grouped list long enough to
    have one; every other value is shown on the first row only.
    """

    def expand(self, item: Any, fields: Sequence[FieldSpec]) -> List[Row]:
        values = {spec.key: resolve(item, spec) if isinstance(item, Mapping) else None for spec in fields}
        arrays = {
            spec.key: values[spec.key]
            for spec in fields
            if spec.group and isinstance(values[spec.key], (list, tuple))
        }
        count = max([len(v) for v in arrays.values()] + [1])

        rows: List[Row] = []
        for i in range(count):
            row: Row = {}
            for spec in fields:
                if spec.key in arrays:
                    elements = arrays[spec.key]
                    row[spec.key] = elements[i] if i < len(elements) else None
                else:
                    row[spec.key] = values[spec.key] if i == 0 else None
            rows.append(row)
        return rows


def expand_item(item: Any, fields: Sequence[FieldSpec]) -> List[Row]:
    return RowExpander().expand(item, fields)
