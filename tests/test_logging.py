"""
Tests for the bitwallet logger factory
"""
import logging

import pytest

from bitwallet.core import LOGGING, get_logger, resolve_level


def test_resolve_level(monkeypatch):
    monkeypatch.delenv(LOGGING.LEVEL_ENV, raising=False)
    assert resolve_level() == logging.INFO
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(logging.WARNING) == logging.WARNING

    monkeypatch.setenv(LOGGING.LEVEL_ENV, "error")
    assert resolve_level() == logging.ERROR

    with pytest.raises(ValueError):
        resolve_level("chatty")


def test_namespace():
    """
    Loggers live under the bitwallet namespace, which holds the only console handler
    """
    logger = get_logger("test_namespace_outside")
    inside = get_logger("bitwallet.test_namespace_inside")

    assert logger.name == "bitwallet.test_namespace_outside"
    assert inside.name == "bitwallet.test_namespace_inside"
    assert not logger.handlers and logger.propagate

    namespace = logging.getLogger(LOGGING.NAMESPACE)
    get_logger("bitwallet.test_namespace_again")
    assert len(namespace.handlers) == 1, "Namespace console handler must be added once"


def test_level_from_environment(monkeypatch):
    monkeypatch.setenv(LOGGING.LEVEL_ENV, "WARNING")
    logger = get_logger("bitwallet.test_level_env")
    assert logger.level == logging.WARNING

    # An explicit level always applies
    assert get_logger("bitwallet.test_level_env", log_level="DEBUG").level == logging.DEBUG


def test_log_file(tmp_path):
    log_file = tmp_path / "logs" / "wallet.log"
    logger = get_logger("bitwallet.test_log_file", log_level="INFO", log_file=log_file)
    get_logger("bitwallet.test_log_file", log_file=log_file)

    file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
    assert len(file_handlers) == 1, "The same log file must only be attached once"

    logger.info("derived child key")
    for handler in file_handlers:
        handler.flush()
        handler.close()
        logger.removeHandler(handler)

    contents = log_file.read_text()
    assert "[bitwallet.test_log_file] [INFO]: derived child key" in contents
