import json
import logging

import pytest

from email_verification.logging_config import RequestIdFilter, set_request_id, setup_logging


@pytest.fixture
def json_logging(settings):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    setup_logging(settings)
    yield
    for h in root.handlers[:]:
        root.removeHandler(h)
    for h in saved_handlers:
        root.addHandler(h)
    root.setLevel(saved_level)
    set_request_id(None)


def last_line(capsys):
    return json.loads(capsys.readouterr().err.strip().splitlines()[-1])


def test_json_log_lines(json_logging, capsys):
    logging.getLogger("email_verification.handler").info(
        "Extracted email: a@example.com", extra={"aws_request_id": "req-1"}
    )

    line = last_line(capsys)
    assert line["message"] == "Extracted email: a@example.com"
    assert line["levelname"] == "INFO"
    assert line["service"] == "email-verification"
    assert line["environment"] == "dev"
    assert line["aws_request_id"] == "req-1"
    assert line["timestamp"].endswith("Z")


def test_module_loggers_carry_request_id(json_logging, capsys):
    set_request_id("req-2")
    logging.getLogger("email_verification.secrets_client").info("Secrets retrieved successfully.")

    assert last_line(capsys)["aws_request_id"] == "req-2"


def test_request_id_filter_keeps_explicit_id():
    set_request_id("req-3")
    try:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        record.aws_request_id = "explicit"
        assert RequestIdFilter().filter(record)
        assert record.aws_request_id == "explicit"

        other = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        RequestIdFilter().filter(other)
        assert other.aws_request_id == "req-3"
    finally:
        set_request_id(None)
