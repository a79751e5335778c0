import logging
import sys

import pytest

from src.core.logging_config import (
    LOG_FILENAME,
    SafeRotatingFileHandler,
    setup_cli_logging,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_setup_logging_writes_file(tmp_path):
    setup_logging(debug_mode=True, log_to_console=False, log_dir=str(tmp_path))

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0], SafeRotatingFileHandler)

    logging.getLogger("src.test").debug("hello timeline")
    root.handlers[0].flush()
    assert "hello timeline" in (tmp_path / LOG_FILENAME).read_text(encoding="utf-8")


def test_setup_logging_is_idempotent(tmp_path):
    setup_logging(log_dir=str(tmp_path))
    setup_logging(log_dir=str(tmp_path))
    assert len(logging.getLogger().handlers) == 2
    assert logging.getLogger().level == logging.INFO


def test_setup_cli_logging_levels():
    setup_cli_logging(verbose=False)
    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
    assert root.handlers[0].stream is sys.stderr

    setup_cli_logging(verbose=True)
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1


def test_rollover_permission_error_off_windows(tmp_path, monkeypatch):
    handler = SafeRotatingFileHandler(str(tmp_path / "x.log"), maxBytes=1, backupCount=1)

    def locked(self):
        raise PermissionError("locked")

    monkeypatch.setattr(
        "logging.handlers.RotatingFileHandler.doRollover", locked
    )
    monkeypatch.setattr(sys, "platform", "linux")
    with pytest.raises(PermissionError):
        handler.doRollover()

    monkeypatch.setattr(sys, "platform", "win32")
    handler.doRollover()
    handler.close()
