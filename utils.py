from typing import Iterable, List, Optional, Tuple

from models import APP_SUFFIX, DO_NOTHING_TITLE, OTHER_TITLE, TreeRow


SENTINEL_RANKS = {OTHER_TITLE: 1, DO_NOTHING_TITLE: 2}


def normalize_app_name(raw: str) -> str:
    """Return the display name with a trailing .app, added when missing."""
    name = (raw or "").strip()
    if not name:
        return ""
    if name.casefold().endswith(APP_SUFFIX):
        return name
    return f"{name}{APP_SUFFIX}"


def is_do_nothing_name(name: str) -> bool:
    folded = (name or "").strip().casefold()
    if folded.endswith(APP_SUFFIX):
        folded = folded[: -len(APP_SUFFIX)].rstrip()
    return folded == DO_NOTHING_TITLE.casefold()


def handler_sort_key(row: TreeRow) -> Tuple[int, str]:
    # "Other..." then "Do Nothing" always trail the real handlers.
    rank = SENTINEL_RANKS.get(row.title, 0)
    if rank:
        return rank, ""
    return 0, row.title


def join_extensions(extensions: Optional[Iterable[str]], separator: str = ", ") -> Optional[str]:
    if extensions is None:
        return None
    parts = [str(ext).strip() for ext in extensions if str(ext).strip()]
    if not parts:
        return None
    return separator.join(parts)


def normalize_extension(raw: str) -> str:
    return (raw or "").strip().lstrip(".").casefold()


def unique_casefold(values: Iterable[str]) -> List[str]:
    seen = set()
    result: List[str] = []
    for value in values:
        name = str(value).strip()
        if not name:
            continue
        folded = name.casefold()
        if folded in seen:
            continue
        seen.add(folded)
        result.append(name)
    return result
