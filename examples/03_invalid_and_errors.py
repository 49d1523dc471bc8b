from __future__ import annotations

import logging

from json2table import RenderConfig, StructureSyntaxError, parse_structure, render_table

logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

rows = [{"msg": "first entry"}, "not an object", {"msg": "a rather long message that wraps"}]

# skipped with a warning
print(render_table(rows, "msg{width:16}", cfg=RenderConfig(line_numbers=True)))
print()
# kept as a marker row
print(render_table(rows, "msg{width:16}", cfg=RenderConfig(line_numbers=True, show_invalid=True)))
print()

for bad in ("name,,age", "books[]", "name{width:wide}", "address[city"):
    try:
        parse_structure(bad)
    except StructureSyntaxError as e:
        print(f"{bad!r:>22} -> {e}")
