from models import DO_NOTHING_TITLE, OTHER_TITLE, TreeRow
from utils import handler_sort_key, is_do_nothing_name, join_extensions, normalize_app_name, normalize_extension, unique_casefold


def test_normalize_app_name() -> None:
    assert normalize_app_name("Safari") == "Safari.app"
    assert normalize_app_name("Safari.app") == "Safari.app"
    assert normalize_app_name("Preview.APP") == "Preview.APP"
    assert normalize_app_name("  TextEdit ") == "TextEdit.app"
    assert normalize_app_name("") == ""


def test_is_do_nothing_name() -> None:
    assert is_do_nothing_name("Do Nothing") is True
    assert is_do_nothing_name("do nothing.app") is True
    assert is_do_nothing_name("DO NOTHING.APP") is True
    assert is_do_nothing_name("Do Nothing Else.app") is False
    assert is_do_nothing_name("") is False


def test_handler_sort_key_orders_sentinels_last() -> None:
    rows = [TreeRow(DO_NOTHING_TITLE), TreeRow("Zed.app"), TreeRow(OTHER_TITLE), TreeRow("Atom.app")]
    rows.sort(key=handler_sort_key)
    assert [row.title for row in rows] == ["Atom.app", "Zed.app", OTHER_TITLE, DO_NOTHING_TITLE]


def test_join_extensions() -> None:
    assert join_extensions(["jpg", " jpeg "]) == "jpg, jpeg"
    assert join_extensions([]) is None
    assert join_extensions(None) is None
    assert join_extensions(["a", "b"], separator="|") == "a|b"


def test_normalize_extension() -> None:
    assert normalize_extension(".JPG") == "jpg"
    assert normalize_extension("") == ""


def test_unique_casefold() -> None:
    assert unique_casefold(["http", "HTTP", "", "ftp", "  "]) == ["http", "ftp"]
