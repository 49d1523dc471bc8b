from __future__ import annotations

from json2table import RenderConfig, TableFormatter

authors = [
    {
        "id": 1,
        "name": "Frank Herbert",
        "address": {"city": "Tacoma", "zip": "98401"},
        "books": [
            {"title": "Dune", "year": 1965, "meta": {"pages": 412}},
            {"title": "Dune Messiah", "year": 1969, "meta": {"pages": 256}},
        ],
        "lastBook": {"title": "Chapterhouse: Dune", "year": 1985},
    },
    {
        "id": 22,
        "name": "Jane Austen",
        "address": {"city": "Steventon"},
        "books": [{"title": "Emma", "year": 1815}],
        "lastBook": {"title": "Persuasion"},
    },
]

structure = (
    "id,name,"
    "address:Address[city,zip],"
    "books:Books[title{color:green},year,meta.pages:Pages],"
    "lastBook:Last Book(title){width:12;truncate:true}"
)

formatter = TableFormatter(structure, RenderConfig())
print(formatter.render(authors))
print()
print(TableFormatter(structure, RenderConfig(fmt="md")).render(authors))
