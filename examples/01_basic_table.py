from __future__ import annotations

import json

from json2table import RenderConfig, render_table

people = json.loads('''
[
  {"name": "Alice", "age": 30, "city": "Seoul"},
  {"name": "Bob", "age": 7, "city": "Busan"},
  {"name": "Chloé", "age": 112}
]
''')

print(render_table(people, "name,age,city"))
print()
print(render_table(people, "name:Name,age:Age{color:cyan},city:City", cfg=RenderConfig(line_numbers=True)))
print()
print(render_table(people, "name,age,city", fmt="md"))
