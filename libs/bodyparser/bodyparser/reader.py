"""
Byte-budgeted body reading.

The request body is pulled chunk by chunk and a running total is kept.  The
chunk that pushes the total past the budget is never handed on: the
underlying stream is closed (so the transport is not asked for more) and
:class:`~bodyparser.errors.PayloadTooLarge` is raised.  Bytes are turned into
text only once the whole body fits the budget.

Requests without an incremental ``stream()`` fall back to a single buffered
``body()`` read followed by the same size check.
"""

from __future__ import annotations

import logging
import re
from collections.abc import AsyncIterator, Mapping
from typing import Any

from bodyparser.errors import BodyReadFailed, InvalidContentLength, PayloadTooLarge

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"[0-9]+")


def check_content_length(headers: Mapping[str, str], limit: int) -> int | None:
    """Validate a declared ``Content-Length`` against *limit* before reading."""
    value = headers.get("content-length")
    if not value:
        return None
    value = value.strip()
    if not _DIGITS.fullmatch(value):
        raise InvalidContentLength()
    length = int(value)
    if length > limit:
        raise PayloadTooLarge()
    return length


async def _buffered(request: Any, max_bytes: int) -> AsyncIterator[bytes]:
    try:
        data = await request.body()
    except Exception as exc:
        raise BodyReadFailed() from exc
    if len(data) > max_bytes:
        raise PayloadTooLarge()
    if data:
        yield data


async def iter_bounded(request: Any, max_bytes: int) -> AsyncIterator[bytes]:
    """Yield body chunks while the running total stays within *max_bytes*."""
    stream_factory = getattr(request, "stream", None)
    if stream_factory is None:
        async for chunk in _buffered(request, max_bytes):
            yield chunk
        return

    stream = stream_factory()
    total = 0
    try:
        while True:
            try:
                chunk = await stream.__anext__()
            except StopAsyncIteration:
                break
            except Exception as exc:
                logger.info("Body stream failed after %d bytes: %s", total, type(exc).__name__)
                raise BodyReadFailed() from exc
            total += len(chunk)
            if total > max_bytes:
                logger.info("Body exceeded budget of %d bytes, aborting read", max_bytes)
                raise PayloadTooLarge()
            if chunk:
                yield chunk
    finally:
        aclose = getattr(stream, "aclose", None)
        if aclose is not None:
            await aclose()


async def read_bounded_bytes(request: Any, max_bytes: int) -> bytes:
    buffer = bytearray()
    async for chunk in iter_bounded(request, max_bytes):
        buffer += chunk
    return bytes(buffer)


async def read_bounded(request: Any, max_bytes: int) -> str:
    data = await read_bounded_bytes(request, max_bytes)
    return data.decode("utf-8", errors="replace")
