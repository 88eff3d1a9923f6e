"""
JSON logger factory.

Run with: pytest tests/unit/test_logging_config.py -v
"""

import logging

from pythonjsonlogger.json import JsonFormatter

from core.logging_config import get_logger


def test_logger_configured_once():
    first = get_logger("tests.factory", logging.DEBUG)
    second = get_logger("tests.factory", logging.DEBUG)

    assert first is second
    assert len(first.handlers) == 1
    assert isinstance(first.handlers[0].formatter, JsonFormatter)
    assert first.level == logging.DEBUG
    assert first.propagate is False


def test_verbose_cli_client_gets_debug_logger(settings):
    from cli import doctor

    client = doctor.open_client(settings, verbose=True)
    try:
        assert client.logger is logging.getLogger("cinebot")
        assert client.logger.level == logging.DEBUG
    finally:
        client.close()

    quiet = doctor.open_client(settings)
    try:
        assert quiet.logger is None
    finally:
        quiet.close()
