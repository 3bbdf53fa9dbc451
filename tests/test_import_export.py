import csv
import json

import pytest
from openpyxl import load_workbook

from import_export import HANDLER_HEADERS, export_csv, export_tree, export_xlsx, flatten_tree, load_json, save_json
from models import ContentKind, HandlerDescriptor, Role, TreeRow


def _tree():
    viewer = TreeRow("Viewer")
    viewer.add_child(TreeRow("Preview.app", payload=HandlerDescriptor(
        ContentKind.TYPE_IDENTIFIER, "public.png", "/Applications/Preview.app", Role.VIEWER)))
    viewer.add_child(TreeRow("Other...", payload=HandlerDescriptor(
        ContentKind.TYPE_IDENTIFIER, "public.png", "Other...", Role.VIEWER)))
    editor = TreeRow("Editor")
    return [viewer, editor]


def test_flatten_tree_one_row_per_leaf() -> None:
    rows = flatten_tree(_tree())
    assert rows == [
        ["Viewer", "Preview.app", "Viewer", "/Applications/Preview.app", "TypeIdentifier", "public.png"],
        ["Viewer", "Other...", "Viewer", "Other...", "TypeIdentifier", "public.png"],
    ]


def test_flatten_nested_path() -> None:
    utis = TreeRow("Uniform Type Identifiers")
    shell = TreeRow("Shell")
    shell.add_child(TreeRow("public.script", payload=HandlerDescriptor(
        ContentKind.TYPE_IDENTIFIER, "public.script", "com.example.Term", Role.SHELL)))
    utis.add_child(shell)
    assert flatten_tree([utis])[0][0] == "Uniform Type Identifiers / Shell"


def test_export_csv(tmp_path) -> None:
    path = tmp_path / "handlers.csv"
    export_csv(str(path), _tree())
    with open(path, newline="", encoding="utf-8") as fh:
        rows = list(csv.reader(fh))
    assert rows[0] == HANDLER_HEADERS
    assert len(rows) == 3
    assert rows[1][1] == "Preview.app"


def test_export_xlsx(tmp_path) -> None:
    path = tmp_path / "handlers.xlsx"
    export_xlsx(str(path), _tree())
    book = load_workbook(str(path))
    sheet = book["Handlers"]
    values = [list(row) for row in sheet.iter_rows(values_only=True)]
    assert values[0] == HANDLER_HEADERS
    assert values[1][3] == "/Applications/Preview.app"
    assert len(values) == 3


def test_json_round_trip(tmp_path) -> None:
    path = tmp_path / "handlers.json"
    save_json(str(path), _tree())
    restored = load_json(str(path))
    assert [row.title for row in restored] == ["Viewer", "Editor"]
    assert restored[0].children[0].payload.app_name == "/Applications/Preview.app"
    assert restored[1].children == []


def test_load_json_rejects_non_tree(tmp_path) -> None:
    path = tmp_path / "bad.json"
    path.write_text('{"tree": 3}', encoding="utf-8")
    with pytest.raises(ValueError):
        load_json(str(path))


def test_export_tree_dispatches_on_extension(tmp_path) -> None:
    path = tmp_path / "out.CSV"
    export_tree(str(path), _tree())
    assert path.exists()
    with pytest.raises(ValueError):
        export_tree(str(tmp_path / "out.txt"), _tree())


def test_export_tree_json_carries_content_header(tmp_path) -> None:
    path = tmp_path / "tree.json"
    export_tree(str(path), _tree(), content={"name": "public.png", "kind": "TypeIdentifier", "description": "PNG"})
    with open(path, encoding="utf-8") as fh:
        payload = json.load(fh)
    assert payload["content"]["name"] == "public.png"
    assert load_json(str(path))[0].title == "Viewer"
