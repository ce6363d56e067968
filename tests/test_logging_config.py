"""Tests for the service logging setup."""
from __future__ import annotations

import logging

import pytest  # type: ignore[import-not-found]

from reading_list_api.app import main
from reading_list_api.app.core.logging_config import setup_logging


@pytest.fixture
def service_logger():
    logger = logging.getLogger("reading-list-test")
    logger.propagate = False
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True


def test_log_file_receives_records(tmp_path, service_logger):
    logfile = tmp_path / "logs" / "service.log"
    setup_logging("DEBUG", str(logfile), logger=service_logger)

    service_logger.debug("Total books: %d", 3)
    for handler in service_logger.handlers:
        handler.flush()

    text = logfile.read_text(encoding="utf-8")
    assert "[DEBUG] reading-list-test: Total books: 3" in text


def test_repeated_setup_adds_no_handlers(tmp_path, service_logger):
    setup_logging("INFO", str(tmp_path / "service.log"), logger=service_logger)
    installed = list(service_logger.handlers)
    setup_logging("INFO", str(tmp_path / "service.log"), logger=service_logger)
    assert service_logger.handlers == installed
    assert len(installed) == 2


def test_log_file_added_by_later_setup(tmp_path, service_logger):
    setup_logging("INFO", logger=service_logger)
    setup_logging("INFO", str(tmp_path / "service.log"), logger=service_logger)
    assert [type(h) for h in service_logger.handlers] == [logging.StreamHandler, logging.FileHandler]


def test_unknown_level_falls_back_to_info(service_logger):
    setup_logging("chatty", logger=service_logger)
    assert service_logger.level == logging.INFO
    assert len(service_logger.handlers) == 1


def test_create_app_passes_configured_log_file(monkeypatch, tmp_path):
    calls = []
    monkeypatch.setattr(main, "setup_logging", lambda *args: calls.append(args))
    monkeypatch.setattr(main.settings, "log_file", str(tmp_path / "service.log"))
    monkeypatch.setattr(main.settings, "log_level", "DEBUG")

    main.create_app()

    assert calls == [("DEBUG", str(tmp_path / "service.log"))]
