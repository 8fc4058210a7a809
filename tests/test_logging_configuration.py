import json
import logging

import pytest
import structlog

from authenticator import base32
from authenticator import logging as logging_config
from authenticator.provisioning import generate_secret
from authenticator.totp import compute_code, verify_code


def _reset_root_logger(original_handlers):
    root = logging.getLogger()
    root.handlers = list(original_handlers)
    root.setLevel(logging.WARNING)


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    yield root
    _reset_root_logger(original_handlers)


@pytest.mark.parametrize(
    "level,expected",
    [("DEBUG", logging.DEBUG), ("warning", logging.WARNING), (logging.ERROR, logging.ERROR), ("bogus", logging.INFO)],
)
def test_setup_logging_resolves_level(restore_root_logger, level, expected):
    logging_config.setup_logging(level=level)

    assert restore_root_logger.level == expected
    assert len(restore_root_logger.handlers) == 1


def test_setup_logging_reads_environment(restore_root_logger, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "ERROR")

    logging_config.setup_logging()

    assert restore_root_logger.level == logging.ERROR


def test_records_are_json_on_stderr(restore_root_logger, capsys):
    logging_config.setup_logging(level="INFO")
    logging_config.bind_contextvars(command="code")
    try:
        logging_config.get_logger("tests").info("something_happened", answer=42)
        logging_config.get_logger("tests").debug("filtered_out")
    finally:
        logging_config.clear_contextvars()

    captured = capsys.readouterr()
    assert captured.out == ""
    lines = [line for line in captured.err.splitlines() if line.strip()]
    assert len(lines) == 1
    payload = json.loads(lines[0])
    assert payload["event"] == "something_happened"
    assert payload["answer"] == 42
    assert payload["command"] == "code"
    assert payload["level"] == "info"
    assert "timestamp" in payload


def test_clear_contextvars_drops_bound_values():
    logging_config.bind_contextvars(command="secret")
    logging_config.clear_contextvars()

    assert structlog.contextvars.get_contextvars() == {}


def test_unconfigured_library_writes_nothing_to_stdout(capsys):
    structlog.reset_defaults()

    secret = generate_secret(16)
    key = base32.decode(secret.base32.lower() + " -")
    compute_code(key, 30, "SHA1", 6, for_time=59)
    verify_code(key, "000000", 30, "SHA1", 6, for_time=59)

    assert capsys.readouterr().out == ""


def test_debug_events_are_dropped_below_stdlib_level(caplog):
    caplog.set_level(logging.WARNING, logger="authenticator.base32")

    base32.decode("MZXW 6YTB-OI")

    assert [record for record in caplog.records if record.name == "authenticator.base32"] == []
