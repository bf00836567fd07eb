# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-16
# Description: test_logging_utils.py
# -----------------------------------------------------------------------------
import logging
import uuid
from logging.handlers import RotatingFileHandler

import pytest

from utility.logging_utils import BASE_LOGGER_NAME, get_class_logger


def _fresh_class():
    # Loggers are cached per name; a new class name gives an unconfigured one
    return type(f"Component{uuid.uuid4().hex[:8]}", (), {})


@pytest.fixture
def log_env(monkeypatch):
    for name in ("EMBED_LOG_TO_FILE", "EMBED_LOG_FILE", "EMBED_LOG_MAX_BYTES", "EMBED_LOG_BACKUP_COUNT", "EMBED_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_class_logger_name_and_defaults(log_env):
    cls = _fresh_class()

    logger = get_class_logger(cls)

    assert logger.name == f"{BASE_LOGGER_NAME}.{cls.__module__}.{cls.__name__}"
    assert logger.level == logging.INFO
    assert logger.propagate is False
    assert not any(isinstance(h, RotatingFileHandler) for h in logger.handlers)


def test_file_logging_is_opt_in(log_env, tmp_path):
    log_file = tmp_path / "logs" / "embed.log"
    log_env.setenv("EMBED_LOG_TO_FILE", "yes")
    log_env.setenv("EMBED_LOG_FILE", str(log_file))
    log_env.setenv("EMBED_LOG_MAX_BYTES", "2048")
    log_env.setenv("EMBED_LOG_BACKUP_COUNT", "2")
    log_env.setenv("EMBED_LOG_LEVEL", "debug")

    logger = get_class_logger(_fresh_class())
    [file_handler] = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]

    try:
        logger.debug("written to file")
        file_handler.flush()

        assert logger.level == logging.DEBUG
        assert file_handler.maxBytes == 2048
        assert file_handler.backupCount == 2
        assert "written to file" in log_file.read_text(encoding="utf-8")
    finally:
        file_handler.close()
        logger.removeHandler(file_handler)


def test_bad_boolean_env_fails_fast(log_env):
    log_env.setenv("EMBED_LOG_TO_FILE", "sometimes")

    with pytest.raises(RuntimeError):
        get_class_logger(_fresh_class())
