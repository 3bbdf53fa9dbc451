"""Content and application entities shown side by side in the handler browser.

Both kinds satisfy :class:`ContentEntity` without sharing a base class; the
presentation layer only reads the protocol attributes and dispatches on
``kind`` when it needs to.
"""
import threading
from typing import List, Optional, Protocol, Tuple

from compare import bundle_identity, unique_applications
from logging_setup import get_logger
from models import (
    DO_NOTHING_APP_ID,
    DO_NOTHING_TITLE,
    OTHER_APP_ID,
    OTHER_TITLE,
    URL_SCHEMES_TITLE,
    UTIS_TITLE,
    BundleInfo,
    ContentKind,
    HandlerDescriptor,
    Role,
    TreeRow,
)
from services import Services
from utils import handler_sort_key, is_do_nothing_name, join_extensions, normalize_app_name

logger = get_logger("entities")


class ContentEntity(Protocol):
    kind: ContentKind
    name: str
    description: str

    @property
    def display_name(self) -> str:
        ...

    @property
    def handler_tree(self) -> List[TreeRow]:
        ...

    @property
    def icon(self) -> Optional[str]:
        ...

    @property
    def extensions_summary(self) -> str:
        ...

    def get_description(self) -> str:
        ...


class ContentItem:
    """A type identifier or URL scheme and every application able to handle it."""

    def __init__(
        self,
        kind: ContentKind,
        name: str,
        services: Services,
        description: Optional[str] = None,
    ) -> None:
        self.kind = kind
        self.name = name
        self.services = services
        self.description = ""
        self._display_name: Optional[str] = None
        self._extensions_summary: Optional[str] = None
        self._handler_tree: Optional[List[TreeRow]] = None
        self._tree_lock = threading.Lock()
        if description is not None:
            self.description = description
        else:
            self.description = self.get_description()

    def __repr__(self) -> str:
        return f"ContentItem(kind={self.kind.value!r}, name={self.name!r})"

    @property
    def icon(self) -> Optional[str]:
        return None

    @property
    def display_name(self) -> str:
        if self._display_name is None:
            self._display_name = self.name
        return self._display_name

    @property
    def extensions_summary(self) -> str:
        if self._extensions_summary is None:
            self._extensions_summary = self._build_extensions_summary()
        return self._extensions_summary

    def _build_extensions_summary(self) -> str:
        if self.kind is not ContentKind.TYPE_IDENTIFIER:
            return ""
        extensions = join_extensions(self.services.types.extensions_for(self.name))
        return f"Extensions: {extensions or ''}"

    def get_description(self) -> str:
        if self.kind is ContentKind.URL_SCHEME:
            scheme_name = self.services.resolver.name_for_scheme(self.name)
            if scheme_name:
                self.description = scheme_name
                return self.description
            return ""
        if self.kind is ContentKind.TYPE_IDENTIFIER:
            return self.services.types.description_for(self.name) or ""
        return ""

    @property
    def handler_tree(self) -> List[TreeRow]:
        if self._handler_tree is None:
            with self._tree_lock:
                if self._handler_tree is None:
                    self._handler_tree = self._build_handler_tree()
        return self._handler_tree

    def _build_handler_tree(self) -> List[TreeRow]:
        roles: List[TreeRow] = []
        for role in Role.for_kind(self.kind):
            category = TreeRow(role.display_name)
            apps = self.services.resolver.handlers_for(self.name, self.kind, role, as_path=True) or []
            resolved = [(app, self.services.bundles.resolve(app)) for app in apps]
            for app, bundle in unique_applications(resolved, identity=_pair_identity):
                row = self._handler_row(app, bundle, role)
                if row is not None:
                    category.add_child(row)
            category.add_child(TreeRow(OTHER_TITLE, payload=self._descriptor(OTHER_APP_ID, role)))
            category.add_child(TreeRow(DO_NOTHING_TITLE, payload=self._descriptor(DO_NOTHING_APP_ID, role)))
            category.sort_children(handler_sort_key)
            logger.debug("built %s handlers for %s role=%s count=%d",
                         self.kind.value, self.name, role.value, len(category.children) - 2)
            roles.append(category)
        return roles

    def _handler_row(self, app: str, bundle: Optional[BundleInfo], role: Role) -> Optional[TreeRow]:
        if app == DO_NOTHING_APP_ID:
            return None
        title = normalize_app_name(self._application_title(app, bundle))
        if not title or is_do_nothing_name(title):
            logger.debug("skipping handler %s for %s", app, self.name)
            return None
        return TreeRow(title, payload=self._descriptor(app, role))

    def _application_title(self, app: str, bundle: Optional[BundleInfo]) -> str:
        if bundle is not None and bundle.display_name:
            return bundle.display_name
        return self.services.file_display_name(app) or app

    def _descriptor(self, app: str, role: Role) -> HandlerDescriptor:
        return HandlerDescriptor(content_kind=self.kind, content_name=self.name, app_name=app, role=role)


class ApplicationItem:
    """An installed application and the URL schemes and type identifiers it declares."""

    kind = ContentKind.APPLICATION

    def __init__(self, bundle: BundleInfo, services: Services) -> None:
        self.bundle = bundle
        self.services = services
        self.name = bundle.display_name
        self.description = ""
        self._display_name: Optional[str] = None
        self._handler_tree: Optional[List[TreeRow]] = None
        self._tree_lock = threading.Lock()
        self.description = self.get_description()

    @classmethod
    def create(cls, app: str, services: Services) -> Optional["ApplicationItem"]:
        bundle = services.bundles.resolve(app)
        if bundle is None:
            logger.info("no bundle info for %s", app)
            return None
        if not (bundle.handles_urls or bundle.handles_utis):
            logger.info("%s declares no URL schemes or type identifiers", app)
            return None
        return cls(bundle, services)

    def __repr__(self) -> str:
        return f"ApplicationItem(name={self.name!r}, bundle_id={self.bundle_id!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApplicationItem):
            return NotImplemented
        if self.bundle_id is None or other.bundle_id is None:
            return self is other
        return self.bundle_id == other.bundle_id

    def __hash__(self) -> int:
        if self.bundle_id is None:
            return id(self)
        return hash(self.bundle_id)

    @property
    def bundle_id(self) -> Optional[str]:
        return self.bundle.bundle_id or None

    @property
    def path(self) -> str:
        return self.bundle.path or ""

    @property
    def icon(self) -> Optional[str]:
        return self.bundle.icon

    @property
    def display_name(self) -> str:
        if self._display_name is None:
            self._display_name = self.name
        return self._display_name

    @property
    def extensions_summary(self) -> str:
        return ""

    def get_description(self) -> str:
        if self.bundle.version:
            return f"Version: {self.bundle.version}"
        return ""

    @property
    def handler_tree(self) -> List[TreeRow]:
        if self._handler_tree is None:
            with self._tree_lock:
                if self._handler_tree is None:
                    self._handler_tree = self._build_handler_tree()
        return self._handler_tree

    def _build_handler_tree(self) -> List[TreeRow]:
        all_handlers: List[TreeRow] = []
        if self.bundle.handles_urls:
            urls = TreeRow(URL_SCHEMES_TITLE)
            # A single role applies to schemes, so its rows sit directly under the category.
            row = self._role_row(ContentKind.URL_SCHEME, Role.VIEWER)
            if row.children:
                urls.add_children_of(row)
            all_handlers.append(urls)
        if self.bundle.handles_utis:
            utis = TreeRow(UTIS_TITLE)
            for role in Role.for_kind(ContentKind.TYPE_IDENTIFIER):
                row = self._role_row(ContentKind.TYPE_IDENTIFIER, role)
                if row.children:
                    utis.add_child(row)
            all_handlers.append(utis)
        return all_handlers

    def _role_row(self, kind: ContentKind, role: Role) -> TreeRow:
        row = TreeRow(role.display_name)
        for handler in self.bundle.handled(kind, role):
            row.add_child(TreeRow(handler.content_name, payload=handler))
        return row


def content_for(descriptor: HandlerDescriptor, services: Services) -> ContentItem:
    """Rebuild the content entity a descriptor was produced for."""
    return ContentItem(descriptor.content_kind, descriptor.content_name, services)


def _pair_identity(pair: Tuple[str, Optional[BundleInfo]]) -> Optional[str]:
    return bundle_identity(pair[1])
