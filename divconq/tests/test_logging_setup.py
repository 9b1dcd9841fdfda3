import logging

import pytest
from pydantic import ValidationError

from divconq.logging_setup import LoggingConfig, is_configured, setup_logging


def test_level_is_normalised():
    assert LoggingConfig(level="debug").level == "DEBUG"


def test_unknown_level_rejected():
    with pytest.raises(ValidationError):
        LoggingConfig(level="chatty")


def test_setup_with_file(tmp_path, restore_logging):
    config = setup_logging({"level": "info", "log_dir": str(tmp_path), "app_name": "bench"})
    root = logging.getLogger()

    assert config.level == "INFO"
    assert is_configured()
    assert root.level == logging.INFO
    assert len(root.handlers) == 2
    assert all(handler.level == logging.INFO for handler in root.handlers)

    logging.getLogger("divconq.test").info("hello file")
    for handler in root.handlers:
        handler.flush()
    assert "hello file" in (tmp_path / "bench.log").read_text(encoding="utf-8")


def test_setup_replaces_handlers(restore_logging):
    setup_logging()
    setup_logging(LoggingConfig(level="WARNING"))
    assert len(logging.getLogger().handlers) == 1
