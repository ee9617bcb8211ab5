"""Tests for appdatarepo.logging_config module."""

from __future__ import annotations

import logging
from unittest import mock

from appdatarepo.logging_config import LOG_LEVEL_ENV, level_for_verbosity, setup_logging


class TestLevelForVerbosity:
    def test_verbosity_counts(self) -> None:
        with mock.patch.dict("os.environ", {}, clear=True):
            assert level_for_verbosity(0) == logging.WARNING
            assert level_for_verbosity(1) == logging.INFO
            assert level_for_verbosity(2) == logging.DEBUG
            assert level_for_verbosity(5) == logging.DEBUG

    def test_env_wins(self) -> None:
        with mock.patch.dict("os.environ", {LOG_LEVEL_ENV: "info"}):
            assert level_for_verbosity(0) == logging.INFO

    def test_unknown_env_ignored(self) -> None:
        with mock.patch.dict("os.environ", {LOG_LEVEL_ENV: "LOUD"}):
            assert level_for_verbosity(1) == logging.INFO


class TestSetupLogging:
    def test_configures_package_logger(self) -> None:
        with mock.patch.dict("os.environ", {}, clear=True):
            setup_logging(1)
        logger = logging.getLogger("appdatarepo")
        assert logger.level == logging.INFO
        assert logger.handlers
        assert not logger.propagate

    def test_child_loggers_inherit(self) -> None:
        with mock.patch.dict("os.environ", {}, clear=True):
            setup_logging(2)
        assert logging.getLogger("appdatarepo.core.parser").getEffectiveLevel() == logging.DEBUG
