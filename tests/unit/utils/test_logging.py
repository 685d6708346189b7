"""Unit tests for JSON logging in logging.py

Test coverage includes:

1. JsonFormatter
   - Emits timestamp, level, logger and message as JSON.
   - Attaches `extra` fields and serializes unknown types as strings.
   - Attaches formatted exceptions.

2. initialize_logging()
   - Installs the JSON formatter on the root logger at LOG_LEVEL.
"""

import sys
import json
import logging

import pytest
from freezegun import freeze_time

from bloomshortener.constants import ENV
from bloomshortener.utils.logging import JsonFormatter, initialize_logging


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def formatter():
    return JsonFormatter()


def make_record(msg='Membership filter warmed.', level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord('bloomshortener.pipeline', level, __file__, 1, msg, None, exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


# -------------------------------
# 1. JsonFormatter
# -------------------------------


@freeze_time('2025-12-26 12:00:00')
def test_format_standard_fields(formatter):
    """Ensure the standard fields are emitted as JSON."""
    log = json.loads(formatter.format(make_record()))

    assert log == {
        'timestamp': '2025-12-26T12:00:00.000Z',
        'level': 'INFO',
        'logger': 'bloomshortener.pipeline',
        'message': 'Membership filter warmed.',
    }


def test_format_extra_fields(formatter):
    """Ensure `extra` fields are attached and non-JSON values are stringified."""
    log = json.loads(formatter.format(make_record(shortcodes=42, error=ValueError('bad'))))

    assert log['shortcodes'] == 42
    assert log['error'] == 'bad'


def test_format_exception(formatter):
    """Ensure exception tracebacks are attached."""
    try:
        raise RuntimeError('boom')
    except RuntimeError:
        record = make_record('Unhandled exception.', level=logging.ERROR, exc_info=sys.exc_info())

    log = json.loads(formatter.format(record))

    assert log['level'] == 'ERROR'
    assert 'RuntimeError: boom' in log['exception']


# -------------------------------
# 2. initialize_logging()
# -------------------------------


def test_initialize_logging(monkeypatch):
    """Ensure the root logger emits JSON at the configured level."""
    monkeypatch.setenv(ENV.App.LOG_LEVEL, 'debug')
    root = logging.getLogger()
    previous_handlers, previous_level = root.handlers[:], root.level

    try:
        initialize_logging()

        assert root.level == logging.DEBUG
        assert any(isinstance(handler.formatter, JsonFormatter) for handler in root.handlers)
    finally:
        root.handlers = previous_handlers
        root.setLevel(previous_level)
