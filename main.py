import argparse
import os
import sys
from typing import Dict, List, Optional, Union

from catalog import load_catalog
from entities import ApplicationItem, ContentItem, content_for
from import_export import export_tree
from logging_setup import configure_logging, get_logger
from models import ContentKind, TreeRow
from services import Services
from store import (
    LOG_LEVELS,
    default_settings_path,
    load_settings,
    resolve_catalog_path,
    resolve_data_dir,
    resolve_export_path,
    save_settings,
)

logger = get_logger("main")

KIND_CHOICES = {
    "uti": ContentKind.TYPE_IDENTIFIER,
    "scheme": ContentKind.URL_SCHEME,
    "app": ContentKind.APPLICATION,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="handler-mapper",
        description="Show the applications able to handle a type identifier, URL scheme or application.",
    )
    parser.add_argument("content", help="Type identifier, URL scheme, or application path/name/bundle id")
    parser.add_argument("--kind", choices=sorted(KIND_CHOICES), default="uti", help="What CONTENT names")
    parser.add_argument("--catalog", default="", help="Catalog JSON file (overrides settings)")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default=None, help="Log level (overrides settings)")
    parser.add_argument("--export", default="", help="Write the tree to a .csv, .xlsx or .json file")
    parser.add_argument("--export-dir", default=None, help="Directory for relative --export paths")
    parser.add_argument("--remember", action="store_true",
                        help="Store --catalog, --log-level and --export-dir in the settings file")
    return parser


def render_tree(rows: List[TreeRow], services: Optional[Services] = None, indent: str = "  ") -> List[str]:
    """Indented titles; with services, content leaves also show the content's description."""
    lines: List[str] = []
    for top in rows:
        for depth, row in top.walk():
            line = f"{indent * depth}{row.title}"
            if services is not None and row.is_leaf and row.payload.content_name == row.title:
                description = content_for(row.payload, services).description
                if description:
                    line = f"{line} ({description})"
            lines.append(line)
    return lines


def build_entity(content: str, kind: ContentKind, services: Services) -> Optional[Union[ContentItem, ApplicationItem]]:
    if kind is ContentKind.APPLICATION:
        return ApplicationItem.create(content, services)
    return ContentItem(kind, content, services)


def content_summary(entity: Union[ContentItem, ApplicationItem]) -> Dict[str, str]:
    return {
        "name": entity.name,
        "kind": entity.kind.value,
        "description": entity.description,
    }


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    data_dir = resolve_data_dir()
    settings_path = default_settings_path(data_dir)
    settings = load_settings(settings_path)
    if args.export_dir is not None:
        settings.export_dir = args.export_dir.strip()
    if args.log_level:
        settings.log_level = args.log_level
    configure_logging(data_dir, settings.log_level)

    catalog_path = args.catalog or resolve_catalog_path(settings, data_dir)
    if not catalog_path:
        print("No catalog configured; pass --catalog.", file=sys.stderr)
        return 2
    try:
        catalog = load_catalog(catalog_path)
    except (OSError, ValueError) as exc:
        # json.JSONDecodeError is a ValueError.
        logger.error("failed to load catalog %s: %s", catalog_path, exc)
        print(f"Could not load catalog {catalog_path}: {exc}", file=sys.stderr)
        return 2

    if args.remember:
        settings.catalog_path = os.path.abspath(catalog_path)
        save_settings(settings_path, settings)

    services = Services.from_catalog(catalog)
    entity = build_entity(args.content, KIND_CHOICES[args.kind], services)
    if entity is None:
        print(f"{args.content}: no application found that declares URL schemes or type identifiers.",
              file=sys.stderr)
        return 1

    print(entity.display_name)
    if entity.description:
        print(entity.description)
    if entity.extensions_summary:
        print(entity.extensions_summary)
    tree_services = services if entity.kind is ContentKind.APPLICATION else None
    for line in render_tree(entity.handler_tree, tree_services):
        print(f"  {line}")

    if args.export:
        target = resolve_export_path(args.export, settings)
        try:
            export_tree(target, entity.handler_tree, content=content_summary(entity))
        except (OSError, ValueError) as exc:
            print(f"Export failed: {exc}", file=sys.stderr)
            return 2
        print(f"Exported to {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
