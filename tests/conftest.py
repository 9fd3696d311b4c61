import logging

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo CLI logging setup so later tests don't write to a closed runner stream."""
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()
    root = logging.getLogger("llmprep")
    root.handlers.clear()
    root.propagate = True
    root.setLevel(logging.NOTSET)
