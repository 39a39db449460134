from __future__ import annotations

import logging

import pytest

from haconnect.logger import LOGGER_NAME
from haconnect.shutdown import Shutdown


@pytest.fixture
def shutdown():
    # Every test gets its own coordinator; leftover cleanup threads are
    # released and drained here.
    sd = Shutdown()
    yield sd
    sd.request_stop("test teardown")
    assert sd.wait(timeout=5)


@pytest.fixture
def restore_logger():
    yield
    root = logging.getLogger(LOGGER_NAME)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    root.propagate = True
    root.setLevel(logging.NOTSET)
