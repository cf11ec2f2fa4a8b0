from __future__ import annotations

import logging

import pytest

from core import logging_setup


@pytest.fixture
def restore_levels():
    root, httpx_logger = logging.getLogger(), logging.getLogger("httpx")
    saved = (root.level, httpx_logger.level)
    yield
    root.setLevel(saved[0])
    httpx_logger.setLevel(saved[1])


def test_reconfigure_updates_root_and_httpx_levels(monkeypatch, restore_levels):
    monkeypatch.setattr(logging_setup, "_CONFIGURED", True)

    logging_setup.configure_logging("ERROR")

    assert logging.getLogger().level == logging.ERROR
    assert logging.getLogger("httpx").level == logging.ERROR

    logging_setup.configure_logging("debug")

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING


def test_unknown_level_falls_back_to_warning(monkeypatch, restore_levels):
    monkeypatch.setattr(logging_setup, "_CONFIGURED", True)

    logging_setup.configure_logging("chatty")

    assert logging.getLogger().level == logging.WARNING
