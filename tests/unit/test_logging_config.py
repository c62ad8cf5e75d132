"""Unit tests for the server logging setup."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from pdf_chat.logging_config import configure_logging


@pytest.fixture()
def root_logger() -> Iterator[logging.Logger]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_sets_level_and_single_handler(root_logger: logging.Logger) -> None:
    configure_logging("debug")
    configure_logging("debug")
    assert root_logger.level == logging.DEBUG
    assert len(root_logger.handlers) == 1
    assert isinstance(root_logger.handlers[0], logging.StreamHandler)


def test_unknown_level_falls_back_to_info(root_logger: logging.Logger) -> None:
    configure_logging("chatty")
    assert root_logger.level == logging.INFO


def test_quiets_http_client_loggers(root_logger: logging.Logger) -> None:
    configure_logging("DEBUG")
    assert logging.getLogger("httpx").level == logging.WARNING
