import logging
import sys

import pytest

from rubber.errors import ProtocolViolation
from rubber.logging_config import LIBRARY_LOGGERS, setup_logging

pytestmark = pytest.mark.usefixtures("restore_logging")


def test_library_loggers_stay_quiet_under_debug():
    setup_logging(level="DEBUG")

    assert logging.getLogger().level == logging.DEBUG
    for name in LIBRARY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_rubber_errors_are_one_line(capsys):
    setup_logging()
    sys.excepthook(ProtocolViolation, ProtocolViolation("channel closed"), None)

    err = capsys.readouterr().err
    assert "ProtocolViolation: channel closed" in err
    assert "Traceback" not in err


def test_other_errors_keep_traceback(capsys):
    setup_logging()
    try:
        raise ValueError("boom")
    except ValueError as e:
        sys.excepthook(type(e), e, e.__traceback__)

    err = capsys.readouterr().err
    assert "Uncaught exception" in err
    assert "Traceback" in err


def test_log_file(tmp_path):
    path = tmp_path / "rubber.log"
    setup_logging(level="INFO", log_file=str(path))
    logging.getLogger("rubber.test").info("hello file")

    for handler in logging.getLogger().handlers:
        handler.close()
    assert "hello file" in path.read_text(encoding="utf-8")
