import logging
from logging.handlers import RotatingFileHandler

import pytest

from pr_retest.actions.toolkit import WorkflowCommandHandler


# Handler classes installed by configure_logging; pytest's own handlers are subclasses
INSTALLED_HANDLER_TYPES = (logging.StreamHandler, logging.NullHandler, RotatingFileHandler, WorkflowCommandHandler)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield root
    for handler in root.handlers[:]:
        if type(handler) in INSTALLED_HANDLER_TYPES:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
