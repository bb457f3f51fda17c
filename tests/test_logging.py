"""
Tests for the logging helpers.
"""

import logging

import colorlog
import pytest

from utils.logging import set_log_level, setup_logger


@pytest.fixture
def restore_levels():
    yield
    set_log_level("INFO")


def test_setup_logger_adds_one_colored_handler():
    logger = setup_logger("tests.logging.handler")
    again = setup_logger("tests.logging.handler")
    assert again is logger
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, colorlog.ColoredFormatter)


def test_pulp_logger_is_quiet_without_solver_messages():
    setup_logger("tests.logging.pulp")
    assert logging.getLogger("pulp").level == logging.WARNING


def test_set_log_level_changes_every_module_logger(restore_levels):
    first = setup_logger("tests.logging.first")
    second = setup_logger("tests.logging.second")
    assert set_log_level("debug") == logging.DEBUG
    assert first.level == logging.DEBUG
    assert second.level == logging.DEBUG
    assert set_log_level(logging.WARNING) == logging.WARNING
    assert first.level == logging.WARNING


def test_unknown_level_name_falls_back_to_info(restore_levels):
    logger = setup_logger("tests.logging.unknown")
    assert set_log_level("chatty") == logging.INFO
    assert logger.level == logging.INFO
