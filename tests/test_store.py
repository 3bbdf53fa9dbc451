import json
import os

from store import (
    CATALOG_FILENAME,
    ENV_CATALOG,
    ENV_DATA_DIR,
    Settings,
    default_settings_path,
    load_settings,
    resolve_catalog_path,
    resolve_data_dir,
    resolve_export_path,
    save_settings,
)


def test_resolve_data_dir_prefers_env(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv(ENV_DATA_DIR, str(tmp_path))
    assert resolve_data_dir() == str(tmp_path)
    assert default_settings_path() == os.path.join(str(tmp_path), "settings.json")


def test_default_settings_path_in_given_dir(tmp_path) -> None:
    assert default_settings_path(str(tmp_path)) == os.path.join(str(tmp_path), "settings.json")


def test_resolve_export_path() -> None:
    settings = Settings(export_dir="/exports")
    assert resolve_export_path("tree.csv", settings) == os.path.join("/exports", "tree.csv")
    assert resolve_export_path("/abs/tree.csv", settings) == "/abs/tree.csv"
    assert resolve_export_path("tree.csv", Settings()) == "tree.csv"
    assert resolve_export_path("", settings) == ""


def test_settings_round_trip(tmp_path) -> None:
    path = str(tmp_path / "nested" / "settings.json")
    save_settings(path, Settings(catalog_path="/data/catalog.json", log_level="debug", export_dir="/tmp"))
    loaded = load_settings(path)
    assert loaded == Settings(catalog_path="/data/catalog.json", log_level="DEBUG", export_dir="/tmp")


def test_load_settings_prunes_invalid_values(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"catalog_path": 5, "log_level": "LOUD", "export_dir": " out "}), encoding="utf-8")
    loaded = load_settings(str(path))
    assert loaded.catalog_path == ""
    assert loaded.log_level == "INFO"
    assert loaded.export_dir == "out"


def test_load_settings_missing_or_corrupt(tmp_path) -> None:
    assert load_settings(str(tmp_path / "missing.json")) == Settings()
    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{", encoding="utf-8")
    assert load_settings(str(corrupt)) == Settings()


def test_resolve_catalog_path_order(monkeypatch, tmp_path) -> None:
    monkeypatch.delenv(ENV_CATALOG, raising=False)
    assert resolve_catalog_path(Settings(), str(tmp_path)) == ""
    default = tmp_path / CATALOG_FILENAME
    default.write_text("{}", encoding="utf-8")
    assert resolve_catalog_path(Settings(), str(tmp_path)) == str(default)
    assert resolve_catalog_path(Settings(catalog_path="/x/catalog.json"), str(tmp_path)) == "/x/catalog.json"
    monkeypatch.setenv(ENV_CATALOG, "/env/catalog.json")
    assert resolve_catalog_path(Settings(catalog_path="/x/catalog.json"), str(tmp_path)) == "/env/catalog.json"
