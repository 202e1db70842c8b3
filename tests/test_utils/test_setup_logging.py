import logging

import pytest
from pythonjsonlogger.json import JsonFormatter
from rich.logging import RichHandler

from flagtree.utils import LOG_MODE_ENV, running_in_container, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_cli_mode_uses_rich_handler():
    setup_logging(mode="cli", console_log_level=logging.INFO)
    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0], RichHandler)
    assert handlers[0].level == logging.INFO


def test_json_mode_uses_json_formatter():
    setup_logging(mode="json")
    (handler,) = logging.getLogger().handlers
    assert isinstance(handler.formatter, JsonFormatter)


def test_mode_from_environment(monkeypatch):
    monkeypatch.setenv(LOG_MODE_ENV, "json")
    setup_logging()
    (handler,) = logging.getLogger().handlers
    assert isinstance(handler.formatter, JsonFormatter)


def test_invalid_mode():
    with pytest.raises(ValueError, match="Invalid log mode"):
        setup_logging(mode="xml")


def test_file_handler(tmp_path):
    log_file = tmp_path / "flagtree.log"
    setup_logging(mode="cli", log_filename=str(log_file), json_log_to_file=True)
    file_handlers = [
        handler for handler in logging.getLogger().handlers if isinstance(handler, logging.FileHandler)
    ]
    assert len(file_handlers) == 1
    assert isinstance(file_handlers[0].formatter, JsonFormatter)
    logging.getLogger("flagtree").debug("hello from test")
    file_handlers[0].flush()
    assert "hello from test" in log_file.read_text()
    file_handlers[0].close()


def test_running_in_container_handles_missing_file(monkeypatch):
    def missing(*args, **kwargs):
        raise FileNotFoundError

    monkeypatch.setattr("flagtree.utils.open", missing, raising=False)
    assert running_in_container() is False
