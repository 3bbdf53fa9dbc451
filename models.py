from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple


APP_SUFFIX = ".app"
OTHER_TITLE = "Other..."
DO_NOTHING_TITLE = "Do Nothing"
OTHER_APP_ID = "Other..."
# Bundle id of the helper app registered as the explicit "no handler" choice.
DO_NOTHING_APP_ID = "cl.fail.lordkamina.ThisAppDoesNothing"
URL_SCHEMES_TITLE = "URL Schemes"
UTIS_TITLE = "Uniform Type Identifiers"


class ContentKind(Enum):
    TYPE_IDENTIFIER = "TypeIdentifier"
    URL_SCHEME = "URLScheme"
    APPLICATION = "Application"

    @property
    def handled_key(self) -> str:
        """Key used for this kind inside a bundle's handled-content map."""
        if self is ContentKind.URL_SCHEME:
            return "URLs"
        if self is ContentKind.TYPE_IDENTIFIER:
            return "UTIs"
        return ""


class Role(Enum):
    VIEWER = "Viewer"
    EDITOR = "Editor"
    SHELL = "Shell"

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def for_kind(cls, kind: ContentKind) -> Tuple["Role", ...]:
        if kind is ContentKind.TYPE_IDENTIFIER:
            return (cls.VIEWER, cls.EDITOR, cls.SHELL)
        if kind is ContentKind.URL_SCHEME:
            return (cls.VIEWER,)
        return ()


@dataclass(frozen=True)
class HandlerDescriptor:
    content_kind: ContentKind
    content_name: str
    app_name: str
    role: Role

    def to_dict(self) -> Dict[str, str]:
        return {
            "content_kind": self.content_kind.value,
            "content_name": self.content_name,
            "app_name": self.app_name,
            "role": self.role.value,
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> Optional["HandlerDescriptor"]:
        try:
            kind = ContentKind(raw.get("content_kind"))
            role = Role(raw.get("role"))
        except ValueError:
            return None
        content_name = str(raw.get("content_name") or "").strip()
        app_name = str(raw.get("app_name") or "").strip()
        if not content_name or not app_name:
            return None
        return cls(content_kind=kind, content_name=content_name, app_name=app_name, role=role)


@dataclass(eq=False)
class TreeRow:
    """One row of a handler tree: a category (no payload) or a leaf (payload, no children)."""

    title: str
    payload: Optional[HandlerDescriptor] = None
    children: List["TreeRow"] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return self.payload is not None and not self.children

    def add_child(self, row: "TreeRow") -> None:
        self.children.append(row)

    def add_children_of(self, other: "TreeRow") -> None:
        self.children.extend(other.children)

    def sort_children(self, key: Callable[["TreeRow"], Any], reverse: bool = False) -> None:
        # list.sort is stable; only direct children are reordered.
        self.children.sort(key=key, reverse=reverse)

    def child_titles(self) -> List[str]:
        return [child.title for child in self.children]

    def walk(self, depth: int = 0) -> Iterator[Tuple[int, "TreeRow"]]:
        yield depth, self
        for child in self.children:
            yield from child.walk(depth + 1)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"title": self.title}
        if self.payload is not None:
            data["payload"] = self.payload.to_dict()
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "TreeRow":
        payload = None
        raw_payload = raw.get("payload")
        if isinstance(raw_payload, dict):
            payload = HandlerDescriptor.from_dict(raw_payload)
        row = cls(title=str(raw.get("title") or ""), payload=payload)
        children = raw.get("children")
        if isinstance(children, list):
            for child in children:
                if isinstance(child, dict):
                    row.add_child(cls.from_dict(child))
        return row


@dataclass
class BundleInfo:
    display_name: str
    path: str = ""
    version: str = ""
    bundle_id: Optional[str] = None
    icon: Optional[str] = None
    handles_urls: bool = False
    handles_utis: bool = False
    handled_content: Dict[str, Dict[str, List[HandlerDescriptor]]] = field(default_factory=dict)

    def handled(self, kind: ContentKind, role: Role) -> List[HandlerDescriptor]:
        return list(self.handled_content.get(kind.handled_key, {}).get(role.value, []))
