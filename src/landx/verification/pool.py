"""Bounded, awaitable document verification.

``verify`` reads image headers with blocking file I/O, so each call runs on
Starlette's worker threads. At most ``max_concurrent`` verifications are in
flight; further callers wait up to ``SLOT_TIMEOUT_SECONDS`` for a slot and
then get ``TimeoutError`` (the API turns that into a 503).

Uploads arrive as bytes. They are spooled to a private temp file for the
duration of one verification and removed afterwards, whatever the outcome.
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from starlette.concurrency import run_in_threadpool

from landx.verification.classifier import verify

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from landx.config import Settings
    from landx.verification.classifier import VerificationResult

logger = logging.getLogger(__name__)

SLOT_TIMEOUT_SECONDS: float = 5.0
SPOOL_PREFIX = "landx-"


def spool_and_verify(content: bytes, suffix: str, document_type: str, upload_dir: str | None) -> VerificationResult:
    """Write ``content`` to a temp file, verify it, and delete the file."""
    fd, spooled = tempfile.mkstemp(suffix=suffix, prefix=SPOOL_PREFIX, dir=upload_dir)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(content)
        return verify(spooled, document_type)
    finally:
        Path(spooled).unlink(missing_ok=True)


class VerificationPool:
    """Limits how many documents are verified at once."""

    def __init__(self, settings: Settings) -> None:
        self._slots = asyncio.Semaphore(settings.max_concurrent)
        self._upload_dir = settings.upload_dir
        # Only touched from the event loop thread.
        self._active = 0
        self._waiting = 0

    async def verify_file(self, path: str | Path, document_type: str) -> VerificationResult:
        """Verify an image that already sits on local disk."""
        async with self._slot(document_type):
            return await run_in_threadpool(verify, path, document_type)

    async def verify_upload(self, content: bytes, filename: str | None, document_type: str) -> VerificationResult:
        """Verify uploaded bytes; the file extension of ``filename`` is kept for the spool file."""
        suffix = Path(filename or "").suffix
        async with self._slot(document_type):
            return await run_in_threadpool(spool_and_verify, content, suffix, document_type, self._upload_dir)

    @property
    def active_count(self) -> int:
        """Number of verifications currently running."""
        return self._active

    @property
    def queue_depth(self) -> int:
        """Number of callers waiting for a slot."""
        return self._waiting

    @asynccontextmanager
    async def _slot(self, document_type: str) -> AsyncIterator[None]:
        self._waiting += 1
        try:
            await asyncio.wait_for(self._slots.acquire(), timeout=SLOT_TIMEOUT_SECONDS)
        except TimeoutError:
            logger.warning("No verification slot free for %s after %.1fs", document_type, SLOT_TIMEOUT_SECONDS)
            raise
        finally:
            self._waiting -= 1

        self._active += 1
        try:
            yield
        finally:
            self._active -= 1
            self._slots.release()
