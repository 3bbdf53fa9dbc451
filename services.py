import os
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol

from models import BundleInfo, ContentKind, Role


class HandlerResolver(Protocol):
    def handlers_for(
        self, content: str, kind: ContentKind, role: Role, as_path: bool = True
    ) -> Optional[List[str]]:
        ...

    def name_for_scheme(self, scheme: str) -> Optional[str]:
        ...


class TypeDescriptionService(Protocol):
    def description_for(self, type_identifier: str) -> Optional[str]:
        ...

    def extensions_for(self, type_identifier: str) -> Optional[List[str]]:
        ...


class BundleInfoService(Protocol):
    def resolve(self, app: str) -> Optional[BundleInfo]:
        ...


FileDisplayName = Callable[[str], Optional[str]]


def default_file_display_name(path: str) -> Optional[str]:
    """Last path component, the way a file browser labels an application bundle."""
    if not path:
        return None
    name = os.path.basename(path.rstrip("/\\"))
    return name or None


@dataclass
class Services:
    resolver: HandlerResolver
    types: TypeDescriptionService
    bundles: BundleInfoService
    file_display_name: FileDisplayName = field(default=default_file_display_name)

    @classmethod
    def from_catalog(cls, catalog) -> "Services":
        return cls(resolver=catalog, types=catalog, bundles=catalog)
