import logging
from logging.handlers import RotatingFileHandler

import pytest

from app.core.logging import setup_logging


@pytest.fixture()
def restore_logging():
    yield
    setup_logging(log_dir=None, json_format=False)


def test_no_log_files_without_log_dir(restore_logging, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    setup_logging(log_dir="", json_format=False)

    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert not any(isinstance(h, RotatingFileHandler) for h in handlers)
    assert list(tmp_path.iterdir()) == []


def test_log_dir_adds_app_and_error_files(restore_logging, tmp_path):
    log_dir = tmp_path / "logs"

    setup_logging(log_level="debug", log_dir=str(log_dir))

    file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]
    assert sorted(h.level for h in file_handlers) == [logging.INFO, logging.ERROR]
    assert (log_dir / "app.log").exists()
    assert (log_dir / "error.log").exists()
    assert logging.getLogger().level == logging.DEBUG

    for h in file_handlers:
        h.close()


def test_uvicorn_access_log_is_quieted(restore_logging):
    setup_logging(log_dir=None)

    assert logging.getLogger("uvicorn.access").level == logging.WARNING
