"""Structured JSON Logging Configuration.

Every record is emitted as one JSON object. Two correlation ids ride along
when set: ``request_id`` for the caller's unit of work (see request_scope)
and ``transaction_id`` for the gateway transaction the statement ran in.
"""

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

from pythonjsonlogger import jsonlogger

from ..utils import generate_correlation_id
from .config import settings

request_id_var: ContextVar[str | None] = ContextVar('request_id', default=None)
transaction_id_var: ContextVar[str | None] = ContextVar('transaction_id', default=None)


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding level, source location and correlation ids."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = record.created
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['file'] = record.filename
        log_record['line'] = record.lineno

        # An explicit extra wins over the ambient context
        for key, var in (('request_id', request_id_var), ('transaction_id', transaction_id_var)):
            value = log_record.get(key) or var.get()
            if value is not None:
                log_record[key] = value


def setup_logging():
    """Install a single stdout JSON handler on the root logger."""
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, settings.LOG_LEVEL))
    logger.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        CustomJsonFormatter('%(timestamp)s %(level)s %(name)s %(message)s', timestamp=True)
    )
    logger.addHandler(handler)

    logger.info(
        "Logging configured",
        extra={'log_level': settings.LOG_LEVEL, 'environment': settings.ENVIRONMENT}
    )
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


@contextmanager
def request_scope(request_id: str | None = None) -> Iterator[str]:
    """Tag every record logged inside the block with ``request_id``.

    Usage:
        ```python
        with request_scope() as request_id:
            await repository.apply(job_id, username, state)
        ```
    """
    request_id = request_id or generate_correlation_id("REQ")
    token = request_id_var.set(request_id)
    try:
        yield request_id
    finally:
        request_id_var.reset(token)


@contextmanager
def transaction_scope() -> Iterator[str]:
    """Tag every record logged inside the block with a new transaction id."""
    transaction_id = generate_correlation_id("TX")
    token = transaction_id_var.set(transaction_id)
    try:
        yield transaction_id
    finally:
        transaction_id_var.reset(token)


def get_request_id() -> str | None:
    return request_id_var.get()


def get_transaction_id() -> str | None:
    return transaction_id_var.get()
