"""
Brief: Tests for srvwatch.config.logging_config.init_logging and formatters.

Inputs:
  - None

Outputs:
  - None
"""

import logging
import logging.handlers
from pathlib import Path

import pytest

from srvwatch.config.logging_config import (
    BracketLevelFormatter,
    SyslogFormatter,
    init_logging,
    parse_level,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """
    Brief: Restore root handlers and level after each test.

    Inputs:
      - None

    Outputs:
      - None
    """
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        if h not in handlers:
            h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def test_init_logging_adds_stderr_handler():
    """
    Brief: init_logging configures root logger with stderr handler by default.

    Inputs:
      - cfg: minimal dict with level

    Outputs:
      - None: Asserts StreamHandler present and level applied
    """
    init_logging({"level": "debug"})
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert any(type(h) is logging.StreamHandler for h in root.handlers)


def test_init_logging_none_uses_info():
    """Brief: A missing logging section defaults to INFO on stderr."""
    init_logging(None)
    root = logging.getLogger()
    assert root.level == logging.INFO
    assert len(root.handlers) == 1


def test_init_logging_file_handler_writes(tmp_path):
    """
    Brief: init_logging creates file handler and writes formatted entries.

    Inputs:
      - cfg: file path and level

    Outputs:
      - None: Asserts file created and contains message
    """
    log_path = tmp_path / "logs" / "srvwatch.log"
    init_logging({"level": "info", "stderr": False, "file": str(log_path)})
    logging.getLogger("srvwatch.test").info("file message")
    for h in logging.getLogger().handlers:
        h.flush()
    content = Path(log_path).read_text()
    assert "file message" in content
    assert "[info] srvwatch.test:" in content


def test_init_logging_syslog_dict(monkeypatch):
    """
    Brief: init_logging attaches a syslog handler with address, facility and tag.

    Inputs:
      - syslog: dict with [host, port] address

    Outputs:
      - None: Asserts handler arguments
    """
    created = {}

    class DummySysLogHandler(logging.Handler):
        LOG_USER = 8
        LOG_LOCAL0 = 128

        def __init__(self, address=None, facility=None):
            super().__init__()
            created["address"] = address
            created["facility"] = facility

        def setFormatter(self, fmt):
            created["formatter"] = fmt

        def emit(self, record):
            pass

    monkeypatch.setattr(logging.handlers, "SysLogHandler", DummySysLogHandler)
    init_logging(
        {
            "stderr": False,
            "syslog": {"address": ["127.0.0.1", 514], "facility": "local0", "tag": "api"},
        }
    )
    assert created["address"] == ("127.0.0.1", 514)
    assert created["facility"] == 128
    assert isinstance(created["formatter"], SyslogFormatter)
    assert created["formatter"].tag == "api"


def test_bracket_formatter_uses_utc_record_time():
    """
    Brief: BracketLevelFormatter renders the record's own time in UTC.

    Inputs:
      - LogRecord with created=0

    Outputs:
      - None: Asserts epoch timestamp and level tag
    """
    fmt = BracketLevelFormatter(fmt="%(asctime)s %(level_tag)s %(message)s")
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "careful", None, None)
    record.created = 0.0
    assert fmt.format(record) == "1970-01-01T00:00:00Z [warn] careful"


def test_syslog_formatter_has_no_timestamp():
    """Brief: SyslogFormatter prefixes the tag and omits timestamps."""
    record = logging.LogRecord("svc", logging.ERROR, __file__, 1, "bad %s", ("x",), None)
    assert SyslogFormatter(tag="t").format(record) == "t: [error] svc: bad x"


@pytest.mark.parametrize(
    "name,level",
    [
        ("debug", logging.DEBUG),
        ("WARN", logging.WARNING),
        ("crit", logging.CRITICAL),
        ("bogus", logging.INFO),
        (None, logging.INFO),
    ],
)
def test_parse_level(name, level):
    """Brief: Level names map case-insensitively; unknown names fall back to INFO."""
    assert parse_level(name) == level
