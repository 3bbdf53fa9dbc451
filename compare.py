from typing import Callable, Iterable, List, Optional, Set, TypeVar

T = TypeVar("T")


def bundle_identity(item) -> Optional[str]:
    """Bundle id used as an application's identity; None means unknown."""
    return getattr(item, "bundle_id", None) or None


def unique_applications(
    items: Iterable[T], identity: Callable[[T], Optional[str]] = bundle_identity
) -> List[T]:
    # Only one version of a bundle id can be the handler, so later duplicates are dropped.
    # Items of unknown identity are always kept.
    seen: Set[str] = set()
    result: List[T] = []
    for item in items:
        ident = identity(item)
        if ident is not None:
            if ident in seen:
                continue
            seen.add(ident)
        result.append(item)
    return result
