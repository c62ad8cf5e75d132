"""Unit tests for the stage runner."""

from __future__ import annotations

import threading

import pytest

from pdf_chat.errors import ClientInputError, UpstreamError
from pdf_chat.stages import run_stage


def test_returns_result_inline() -> None:
    assert run_stage("parse", lambda a, b=0: a + b, 1, b=2) == 3


def test_returns_result_with_timeout() -> None:
    assert run_stage("parse", lambda: "ok", timeout=5) == "ok"


def test_foreign_exception_becomes_upstream_error() -> None:
    def boom() -> None:
        raise KeyError("vector")

    with pytest.raises(UpstreamError) as excinfo:
        run_stage("upsert", boom)
    assert excinfo.value.stage == "upsert"
    assert isinstance(excinfo.value.__cause__, KeyError)


def test_package_errors_propagate_unchanged() -> None:
    def reject() -> None:
        raise ClientInputError("bad input")

    with pytest.raises(ClientInputError):
        run_stage("search", reject, timeout=5)


def test_timeout_raises_upstream_error() -> None:
    release = threading.Event()
    try:
        with pytest.raises(UpstreamError, match="timed out") as excinfo:
            run_stage("complete", release.wait, 5, timeout=0.05)
        assert excinfo.value.stage == "complete"
    finally:
        release.set()
