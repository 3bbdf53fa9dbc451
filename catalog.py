import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from logging_setup import get_logger
from models import BundleInfo, ContentKind, HandlerDescriptor, Role
from utils import normalize_extension, unique_casefold

logger = get_logger("catalog")


@dataclass
class CatalogApp:
    path: str
    name: str
    bundle_id: Optional[str] = None
    version: str = ""
    icon: Optional[str] = None
    schemes: List[str] = field(default_factory=list)
    types: Dict[str, List[str]] = field(default_factory=dict)
    extensions: Dict[str, List[str]] = field(default_factory=dict)

    def identifier(self, as_path: bool) -> str:
        if as_path and self.path:
            return self.path
        return self.bundle_id or self.name


class Catalog:
    """Handler database read from a JSON document.

    Serves as handler resolver, type description service and bundle info
    service at once.
    """

    ROLE_NAMES = tuple(role.value for role in Role)

    def __init__(
        self,
        types: Optional[Dict[str, Dict[str, Any]]] = None,
        schemes: Optional[Dict[str, Dict[str, Any]]] = None,
        applications: Optional[List[CatalogApp]] = None,
    ) -> None:
        self.types: Dict[str, Dict[str, Any]] = types or {}
        self.schemes: Dict[str, Dict[str, Any]] = schemes or {}
        self.applications: List[CatalogApp] = applications or []
        self._extension_cache: Dict[str, Optional[str]] = {}
        # Type identifiers and URL schemes are case-insensitive.
        self._type_keys = {key.casefold(): key for key in self.types}
        self._scheme_keys = {key.casefold(): key for key in self.schemes}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Catalog":
        if not isinstance(payload, dict):
            raise ValueError("Catalog document must be a JSON object.")
        types: Dict[str, Dict[str, Any]] = {}
        raw_types = payload.get("types", {})
        if isinstance(raw_types, dict):
            for key, value in raw_types.items():
                if not isinstance(key, str) or not key.strip():
                    continue
                if not isinstance(value, dict):
                    logger.warning("skipping type %s: not an object", key)
                    continue
                types[key.strip()] = {
                    "description": str(value.get("description") or "").strip(),
                    "extensions": cls._string_list(value.get("extensions")),
                }
        schemes: Dict[str, Dict[str, Any]] = {}
        raw_schemes = payload.get("schemes", {})
        if isinstance(raw_schemes, dict):
            for key, value in raw_schemes.items():
                if not isinstance(key, str) or not key.strip():
                    continue
                name = value.get("name") if isinstance(value, dict) else value
                schemes[key.strip()] = {"name": str(name or "").strip()}
        applications: List[CatalogApp] = []
        raw_apps = payload.get("applications", [])
        if isinstance(raw_apps, list):
            for item in raw_apps:
                app = cls._read_app(item)
                if app is not None:
                    applications.append(app)
        return cls(types=types, schemes=schemes, applications=applications)

    @classmethod
    def _read_app(cls, item: Any) -> Optional[CatalogApp]:
        if not isinstance(item, dict):
            logger.warning("skipping application entry: not an object")
            return None
        path = str(item.get("path") or "").strip()
        name = str(item.get("name") or "").strip()
        if not name and path:
            name = path.rstrip("/").rsplit("/", 1)[-1]
            if name.casefold().endswith(".app"):
                name = name[:-4]
        if not name:
            logger.warning("skipping application entry without name or path")
            return None
        return CatalogApp(
            path=path,
            name=name,
            bundle_id=str(item.get("bundle_id") or "").strip() or None,
            version=str(item.get("version") or "").strip(),
            icon=str(item.get("icon") or "").strip() or None,
            schemes=unique_casefold(cls._string_list(item.get("schemes"))),
            types=cls._role_map(item.get("types")),
            extensions=cls._role_map(item.get("extensions")),
        )

    @classmethod
    def _role_map(cls, raw: Any) -> Dict[str, List[str]]:
        if not isinstance(raw, dict):
            return {}
        result: Dict[str, List[str]] = {}
        for role, values in raw.items():
            if role not in cls.ROLE_NAMES:
                continue
            items = unique_casefold(cls._string_list(values))
            if items:
                result[role] = items
        return result

    @staticmethod
    def _string_list(raw: Any) -> List[str]:
        if not isinstance(raw, list):
            return []
        return [str(value).strip() for value in raw if isinstance(value, str) and value.strip()]

    # Handler resolution

    def handlers_for(
        self, content: str, kind: ContentKind, role: Role, as_path: bool = True
    ) -> Optional[List[str]]:
        results: List[str] = []
        folded = content.casefold()
        for app in self.applications:
            if kind is ContentKind.URL_SCHEME:
                if role is not Role.VIEWER:
                    continue
                declared = app.schemes
            elif kind is ContentKind.TYPE_IDENTIFIER:
                declared = self._types_for_role(app, role)
            else:
                continue
            if any(item.casefold() == folded for item in declared):
                results.append(app.identifier(as_path))
        return results or None

    def name_for_scheme(self, scheme: str) -> Optional[str]:
        entry = self._scheme_entry(scheme)
        if not entry:
            return None
        return entry.get("name") or None

    # Type descriptions

    def description_for(self, type_identifier: str) -> Optional[str]:
        entry = self._type_entry(type_identifier)
        if not entry:
            return None
        return entry.get("description") or None

    def extensions_for(self, type_identifier: str) -> Optional[List[str]]:
        entry = self._type_entry(type_identifier)
        if not entry or not entry.get("extensions"):
            return None
        return list(entry["extensions"])

    def _type_entry(self, type_identifier: str) -> Optional[Dict[str, Any]]:
        key = self._type_keys.get((type_identifier or "").strip().casefold())
        return self.types.get(key) if key is not None else None

    def _scheme_entry(self, scheme: str) -> Optional[Dict[str, Any]]:
        key = self._scheme_keys.get((scheme or "").strip().casefold())
        return self.schemes.get(key) if key is not None else None

    def preferred_identifier_for_extension(self, extension: str) -> Optional[str]:
        ext = normalize_extension(extension)
        if not ext:
            return None
        if ext not in self._extension_cache:
            found = None
            for uti, entry in self.types.items():
                if ext in (normalize_extension(value) for value in entry.get("extensions", [])):
                    found = uti
                    break
            self._extension_cache[ext] = found
        return self._extension_cache[ext]

    # Bundle info

    def find_app(self, app: str) -> Optional[CatalogApp]:
        key = (app or "").strip()
        if not key:
            return None
        folded = key.casefold()
        for entry in self.applications:
            if entry.path and entry.path == key:
                return entry
        for entry in self.applications:
            if entry.bundle_id and entry.bundle_id.casefold() == folded:
                return entry
        for entry in self.applications:
            if entry.name.casefold() == folded or f"{entry.name}.app".casefold() == folded:
                return entry
        return None

    def resolve(self, app: str) -> Optional[BundleInfo]:
        entry = self.find_app(app)
        if entry is None:
            return None
        app_name = entry.bundle_id or entry.name
        urls: Dict[str, List[HandlerDescriptor]] = {}
        if entry.schemes:
            urls[Role.VIEWER.value] = [
                HandlerDescriptor(ContentKind.URL_SCHEME, scheme, app_name, Role.VIEWER)
                for scheme in entry.schemes
            ]
        utis: Dict[str, List[HandlerDescriptor]] = {}
        for role in Role.for_kind(ContentKind.TYPE_IDENTIFIER):
            identifiers = self._types_for_role(entry, role)
            if identifiers:
                utis[role.value] = [
                    HandlerDescriptor(ContentKind.TYPE_IDENTIFIER, uti, app_name, role)
                    for uti in identifiers
                ]
        return BundleInfo(
            display_name=entry.name,
            path=entry.path,
            version=entry.version,
            bundle_id=entry.bundle_id,
            icon=entry.icon,
            handles_urls=bool(urls),
            handles_utis=bool(utis),
            handled_content={"URLs": urls, "UTIs": utis},
        )

    def _types_for_role(self, app: CatalogApp, role: Role) -> List[str]:
        declared = app.types.get(role.value)
        if declared:
            return list(declared)
        # Apps that only list file extensions are mapped to the preferred identifier per extension.
        mapped: List[str] = []
        for ext in app.extensions.get(role.value, []):
            uti = self.preferred_identifier_for_extension(ext)
            if uti is None:
                logger.debug("no type identifier for extension %s of %s", ext, app.name)
                continue
            mapped.append(uti)
        return unique_casefold(mapped)


def load_catalog(path: str) -> Catalog:
    with open(path, "r", encoding="utf-8") as fh:
        payload = json.load(fh)
    catalog = Catalog.from_dict(payload)
    logger.info("loaded catalog %s: %d types, %d schemes, %d applications",
                path, len(catalog.types), len(catalog.schemes), len(catalog.applications))
    return catalog
