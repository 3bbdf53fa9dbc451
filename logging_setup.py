import logging
import os
from typing import Dict, Optional

LOGGER_NAME = "handlermapper"
LOG_FILENAME = "handlermapper.log"
LOG_FORMAT = "ts=%(asctime)s level=%(levelname)s logger=%(name)s msg=%(message)s"

_CONFIGURED_PATHS = set()


def configure_logging(base_dir: str, level: str = "INFO") -> Dict[str, str]:
    log_dir = os.path.join(base_dir, "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, LOG_FILENAME)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_level_value(level))
    logger.propagate = False

    if log_path not in _CONFIGURED_PATHS:
        handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        _CONFIGURED_PATHS.add(log_path)

    return {
        "log_path": log_path,
        "format": "kv",
        "handlers": "file",
        "level": logging.getLevelName(logger.level),
        "logger_name": LOGGER_NAME,
    }


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if not name:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def _level_value(level: str) -> int:
    value = logging.getLevelName(str(level or "").upper())
    if isinstance(value, int):
        return value
    return logging.INFO
