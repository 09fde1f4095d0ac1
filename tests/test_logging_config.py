"""Tests for the shared logging setup."""

import logging

import pytest

from omega.database.logging_config import OMEGA_LOGGERS
from omega.database.logging_config import configure_logging


@pytest.fixture(autouse=True)
def restore_loggers():  # noqa: ANN201
    """Put root and package loggers back the way they were."""
    names = ['', *OMEGA_LOGGERS, 'omega.test']
    saved = {}
    for name in names:
        logger = logging.getLogger(name)
        saved[name] = (list(logger.handlers), logger.level, logger.propagate)

    yield

    for name, (handlers, level, propagate) in saved.items():
        logger = logging.getLogger(name)
        logger.handlers = handlers
        logger.setLevel(level)
        logger.propagate = propagate


def test_level_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('OMEGA_DB_LOG_LEVEL', 'debug')

    level = configure_logging()

    assert level == logging.DEBUG
    assert logging.getLogger('omega').level == logging.DEBUG
    assert logging.getLogger('sqlalchemy.engine').level == logging.DEBUG


def test_explicit_level_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('OMEGA_DB_LOG_LEVEL', 'DEBUG')

    assert configure_logging('warning') == logging.WARNING
    assert logging.getLogger().level == logging.WARNING


def test_unknown_level_falls_back_to_info() -> None:
    assert configure_logging('chatty') == logging.INFO


def test_package_loggers_share_one_handler() -> None:
    configure_logging('INFO', ['omega', 'omega.test'])

    omega_logger = logging.getLogger('omega')
    extra_logger = logging.getLogger('omega.test')

    assert omega_logger.propagate is False
    assert extra_logger.propagate is False
    assert omega_logger.handlers == extra_logger.handlers == logging.getLogger().handlers
    assert len(omega_logger.handlers) == 1
