import logging

import pytest

from zkaccess.logging_config import request_id_var


# CLI runs reconfigure the root logger; restore it after each test
@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture(autouse=True)
def _reset_request_id():
    token = request_id_var.set("")
    yield
    request_id_var.reset(token)


@pytest.fixture(autouse=True)
def _default_hash(monkeypatch):
    monkeypatch.delenv("ZKACCESS_HASH", raising=False)
