"""Shared fixtures for appdatarepo tests."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _reset_appdatarepo_logger():
    """Drop handlers installed by setup_logging so they do not outlive a captured stream."""
    yield
    logger = logging.getLogger("appdatarepo")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def rootdir(tmp_path: Path) -> Path:
    """A root prefix holding usr/share/applications and usr/share/metainfo."""
    (tmp_path / "usr" / "share" / "applications").mkdir(parents=True)
    (tmp_path / "usr" / "share" / "metainfo").mkdir(parents=True)
    return tmp_path
