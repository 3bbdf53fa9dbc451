import csv
import datetime as _dt
import json
import os
from typing import Any, Dict, List, Optional

from openpyxl import Workbook

from logging_setup import get_logger
from models import TreeRow

logger = get_logger("import_export")

HANDLER_HEADERS = [
    "Path",
    "Title",
    "Role",
    "Application",
    "ContentKind",
    "Content",
]


def flatten_tree(rows: List[TreeRow], separator: str = " / ") -> List[List[str]]:
    """One output row per leaf, with the category titles leading to it joined into a path."""
    result: List[List[str]] = []

    def visit(row: TreeRow, trail: List[str]) -> None:
        path = trail + [row.title]
        if row.payload is not None:
            payload = row.payload
            result.append([
                separator.join(trail),
                row.title,
                payload.role.value,
                payload.app_name,
                payload.content_kind.value,
                payload.content_name,
            ])
        for child in row.children:
            visit(child, path)

    for top in rows:
        visit(top, [])
    return result


def export_csv(file_path: str, rows: List[TreeRow]) -> None:
    with open(file_path, "w", newline="", encoding="utf-8") as csv_file:
        writer = csv.writer(csv_file)
        writer.writerow(HANDLER_HEADERS)
        for line in flatten_tree(rows):
            writer.writerow(line)


def export_xlsx(file_path: str, rows: List[TreeRow]) -> None:
    book = Workbook(write_only=True)
    sheet = book.create_sheet("Handlers")
    sheet.append(HANDLER_HEADERS)
    for line in flatten_tree(rows):
        sheet.append(line)
    book.save(file_path)


def save_json(file_path: str, rows: List[TreeRow], content: Optional[Dict[str, str]] = None) -> None:
    payload: Dict[str, Any] = {
        "exported_at": _dt.datetime.now().isoformat(timespec="seconds"),
        "tree": [row.to_dict() for row in rows],
    }
    if content:
        payload["content"] = content
    with open(file_path, "w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2)


def load_json(file_path: str) -> List[TreeRow]:
    with open(file_path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    items = data.get("tree") if isinstance(data, dict) else data
    if not isinstance(items, list):
        raise ValueError("JSON file does not contain a handler tree.")
    return [TreeRow.from_dict(item) for item in items if isinstance(item, dict)]


EXPORTERS = {
    ".csv": export_csv,
    ".xlsx": export_xlsx,
    ".json": save_json,
}


def export_tree(file_path: str, rows: List[TreeRow], content: Optional[Dict[str, str]] = None) -> None:
    _base, ext = os.path.splitext(file_path)
    ext = ext.lower()
    exporter = EXPORTERS.get(ext)
    if exporter is None:
        raise ValueError(f"Unsupported export format: {ext or file_path}")
    # Only the JSON document has room for the content header.
    if ext == ".json":
        save_json(file_path, rows, content=content)
    else:
        exporter(file_path, rows)
    logger.info("exported %d rows to %s", len(flatten_tree(rows)), file_path)
