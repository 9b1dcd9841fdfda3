import logging

import pytest
import structlog


@pytest.fixture
def restore_logging():
    """Undo the root logger and structlog changes made by setup_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.captureWarnings(False)
    structlog.reset_defaults()
