import json
import os
from dataclasses import dataclass
from typing import Dict, Optional

from logging_setup import get_logger

APP_NAME = "HandlerMapper"
ENV_DATA_DIR = "HANDLER_MAPPER_DATA_DIR"
ENV_CATALOG = "HANDLER_MAPPER_CATALOG"
SETTINGS_FILENAME = "settings.json"
CATALOG_FILENAME = "catalog.json"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

logger = get_logger("store")


@dataclass
class Settings:
    catalog_path: str = ""
    log_level: str = "INFO"
    export_dir: str = ""


def app_data_dir(app_name: str = APP_NAME) -> str:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA") or os.getenv("APPDATA")
    else:
        base = os.getenv("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    if not base:
        base = os.path.expanduser("~")
    return os.path.join(base, app_name)


def resolve_data_dir() -> str:
    override = os.getenv(ENV_DATA_DIR)
    if override:
        return override
    return app_data_dir()


def default_settings_path(data_dir: Optional[str] = None) -> str:
    return os.path.join(data_dir or resolve_data_dir(), SETTINGS_FILENAME)


def resolve_catalog_path(settings: Settings, data_dir: Optional[str] = None) -> str:
    """Environment override, then the configured path, then catalog.json in the data dir."""
    override = os.getenv(ENV_CATALOG)
    if override:
        return override
    if settings.catalog_path:
        return settings.catalog_path
    candidate = os.path.join(data_dir or resolve_data_dir(), CATALOG_FILENAME)
    if os.path.exists(candidate):
        return candidate
    return ""


def load_settings(path: str) -> Settings:
    settings = Settings()
    if not os.path.exists(path):
        return settings
    try:
        with open(path, "r", encoding="utf-8") as fh:
            payload = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("could not read settings %s: %s", path, exc)
        return settings
    if not isinstance(payload, dict):
        return settings
    catalog_path = payload.get("catalog_path")
    if isinstance(catalog_path, str):
        settings.catalog_path = catalog_path.strip()
    log_level = payload.get("log_level")
    if isinstance(log_level, str) and log_level.strip().upper() in LOG_LEVELS:
        settings.log_level = log_level.strip().upper()
    export_dir = payload.get("export_dir")
    if isinstance(export_dir, str):
        settings.export_dir = export_dir.strip()
    return settings


def settings_to_dict(settings: Settings) -> Dict[str, str]:
    level = settings.log_level.upper() if settings.log_level.upper() in LOG_LEVELS else "INFO"
    return {
        "catalog_path": settings.catalog_path,
        "log_level": level,
        "export_dir": settings.export_dir,
    }


def save_settings(path: str, settings: Settings) -> None:
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(settings_to_dict(settings), fh, indent=2)
    except OSError as exc:
        logger.warning("could not write settings %s: %s", path, exc)


def resolve_export_path(target: str, settings: Settings) -> str:
    """Relative export targets land in the configured export directory."""
    if not target or os.path.isabs(target) or not settings.export_dir:
        return target
    return os.path.join(settings.export_dir, target)
