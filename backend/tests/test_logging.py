"""Tests for structured logging and correlation ids."""

import json
import logging

import pytest

from jobboard.core.logging import (
    CustomJsonFormatter,
    get_logger,
    get_request_id,
    get_transaction_id,
    request_scope,
    setup_logging,
    transaction_scope,
)
from jobboard.utils import generate_correlation_id

FORMAT = '%(timestamp)s %(level)s %(name)s %(message)s'


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


def make_record(msg="Job not found"):
    return logging.LogRecord(
        name="jobboard.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None
    )


def test_generate_correlation_id_prefix():
    correlation_id = generate_correlation_id("TX")
    assert correlation_id.startswith("TX-")
    assert len(correlation_id) == len("TX-") + 32
    assert generate_correlation_id("TX") != correlation_id


def test_request_scope_sets_and_restores():
    assert get_request_id() is None

    with request_scope("req-123") as request_id:
        assert request_id == "req-123"
        assert get_request_id() == "req-123"

    assert get_request_id() is None


def test_request_scope_generates_when_missing():
    with request_scope() as request_id:
        assert request_id.startswith("REQ-")
        assert get_request_id() == request_id


def test_transaction_scope_nests_and_restores():
    with transaction_scope() as outer:
        with transaction_scope() as inner:
            assert get_transaction_id() == inner
        assert get_transaction_id() == outer
    assert get_transaction_id() is None


def test_formatter_emits_json_with_context():
    """Test that records carry level, logger, correlation ids and extra fields."""
    formatter = CustomJsonFormatter(FORMAT, timestamp=True)
    record = make_record()
    record.job_id = 7

    with request_scope("req-json"), transaction_scope() as transaction_id:
        payload = json.loads(formatter.format(record))

    assert payload["message"] == "Job not found"
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "jobboard.test"
    assert payload["request_id"] == "req-json"
    assert payload["transaction_id"] == transaction_id
    assert payload["job_id"] == 7
    assert payload["line"] == 42


def test_formatter_omits_unset_ids():
    payload = json.loads(CustomJsonFormatter(FORMAT, timestamp=True).format(make_record()))

    assert "request_id" not in payload
    assert "transaction_id" not in payload


def test_formatter_prefers_explicit_transaction_id():
    """Test that an id passed in extra survives formatting outside its scope."""
    record = make_record("Executing statement")
    record.transaction_id = "TX-logged"

    payload = json.loads(CustomJsonFormatter(FORMAT, timestamp=True).format(record))

    assert payload["transaction_id"] == "TX-logged"


def test_setup_logging_installs_single_json_handler(restore_root_logger):
    root = setup_logging()

    assert root is restore_root_logger
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, CustomJsonFormatter)


def test_get_logger_returns_named_logger():
    assert get_logger("jobboard.repositories").name == "jobboard.repositories"
