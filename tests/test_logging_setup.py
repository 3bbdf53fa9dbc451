import logging
import os

from logging_setup import LOGGER_NAME, configure_logging, get_logger


def test_configure_logging_writes_kv_lines(tmp_path) -> None:
    info = configure_logging(str(tmp_path), level="DEBUG")
    assert info["log_path"] == os.path.join(str(tmp_path), "logs", "handlermapper.log")
    assert info["level"] == "DEBUG"
    get_logger("tests").debug("hello")
    for handler in logging.getLogger(LOGGER_NAME).handlers:
        handler.flush()
    with open(info["log_path"], encoding="utf-8") as fh:
        text = fh.read()
    assert "level=DEBUG" in text
    assert "msg=hello" in text


def test_configure_logging_is_idempotent(tmp_path) -> None:
    logger = logging.getLogger(LOGGER_NAME)
    configure_logging(str(tmp_path))
    count = len(logger.handlers)
    configure_logging(str(tmp_path))
    assert len(logger.handlers) == count


def test_unknown_level_defaults_to_info(tmp_path) -> None:
    assert configure_logging(str(tmp_path), level="chatty")["level"] == "INFO"


def test_get_logger_names() -> None:
    assert get_logger().name == LOGGER_NAME
    assert get_logger("catalog").name == f"{LOGGER_NAME}.catalog"
