"""Run remote pipeline stages with a time limit and uniform error translation."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Any, Callable, TypeVar

from pdf_chat.errors import PdfChatError, UpstreamError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_stage(
    stage: str,
    func: Callable[..., T],
    *args: Any,
    timeout: float | None = None,
    **kwargs: Any,
) -> T:
    """Call ``func(*args, **kwargs)`` as pipeline stage *stage*.

    Package errors propagate unchanged; any other exception, and expiry of
    *timeout* seconds, are raised as :class:`UpstreamError` for *stage*.
    A falsy *timeout* runs the call inline without a limit.

    A timed-out call cannot be interrupted; its worker thread is abandoned
    and finishes in the background.
    """
    if not timeout:
        return _translate(stage, func, *args, **kwargs)

    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"stage-{stage}")
    try:
        future = executor.submit(_translate, stage, func, *args, **kwargs)
        try:
            return future.result(timeout=timeout)
        except FutureTimeout:
            logger.error("Stage %s timed out after %.1fs", stage, timeout)
            raise UpstreamError(stage, f"timed out after {timeout:g}s") from None
    finally:
        executor.shutdown(wait=False)


def _translate(stage: str, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    try:
        return func(*args, **kwargs)
    except PdfChatError:
        raise
    except Exception as exc:
        logger.warning("Stage %s failed: %s", stage, exc)
        raise UpstreamError(stage, str(exc) or type(exc).__name__) from exc
