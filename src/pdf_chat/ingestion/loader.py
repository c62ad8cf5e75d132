"""PDF loading — thin wrapper around the LangChain PDF loader."""

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

from langchain_community.document_loaders import PyPDFLoader

from pdf_chat.errors import ResourceCleanupFailure

if TYPE_CHECKING:
    from langchain_core.documents import Document

logger = logging.getLogger(__name__)


def load_pdf(path: str | Path, *, source: str | None = None) -> list[Document]:
    """Load a PDF file as one ``Document`` per page.

    Parameters
    ----------
    path:
        Location of the PDF on disk.
    source:
        Overrides the ``source`` metadata (the loader records the file
        path, which for uploads is a meaningless temporary name).
    """
    pages = PyPDFLoader(str(path)).load()
    if source is not None:
        for page in pages:
            page.metadata["source"] = source
    return pages


@contextmanager
def temporary_upload(data: bytes, filename: str = "upload.pdf", directory: str | Path | None = None) -> Iterator[Path]:
    """Write uploaded bytes to a temporary file and always remove it afterwards.

    Failure to remove the file is logged as a
    :class:`~pdf_chat.errors.ResourceCleanupFailure` and never replaces an
    exception raised inside the ``with`` block.
    """
    if directory is not None:
        Path(directory).mkdir(parents=True, exist_ok=True)
    suffix = Path(filename).suffix or ".pdf"
    fd, name = tempfile.mkstemp(suffix=suffix, prefix="upload-", dir=directory)
    path = Path(name)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        yield path
    finally:
        _remove(path)


def _remove(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        failure = ResourceCleanupFailure(f"could not delete {path}: {exc}")
        logger.warning("%s", failure)
