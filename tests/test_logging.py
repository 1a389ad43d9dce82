import logging

import pytest

from ffmpeg_worker.core import logging as worker_logging


@pytest.fixture
def fresh_root(monkeypatch):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    monkeypatch.setattr(worker_logging, "_configured", False)
    yield root
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def test_setup_adds_one_stdout_handler(fresh_root):
    before = len(fresh_root.handlers)

    worker_logging.setup_logging("debug")
    worker_logging.setup_logging("debug")

    assert len(fresh_root.handlers) == before + 1
    assert fresh_root.level == logging.DEBUG
