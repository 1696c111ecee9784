"""
Shared decoder contract.

A decoder owns its content-type match, its size limit and its structural
limits.  :meth:`BodyDecoder.run` never raises for expected violations: every
:class:`~bodyparser.errors.BodyParserError` becomes a
:class:`~bodyparser.errors.DecodeFailure` result.  Anything else is a real
fault and propagates to the caller.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any

from starlette.requests import Request
from starlette.responses import Response

from bodyparser.errors import BodyParserError, DecodeFailure
from bodyparser.limits import parse_limit
from bodyparser.reader import check_content_length
from bodyparser.request import has_body, set_body, set_files, set_raw_body, should_parse

logger = logging.getLogger(__name__)


class BodyFormat(str, enum.Enum):
    JSON = "json"
    URLENCODED = "urlencoded"
    MULTIPART = "multipart"
    TEXT = "text"


@dataclass(frozen=True)
class Decoded:
    body: Any
    raw: str | None = None
    files: dict[str, Any] | None = None


DecodeResult = Decoded | DecodeFailure


def attach(request: Request, decoded: Decoded) -> None:
    set_body(request, decoded.body)
    if decoded.files is not None:
        set_files(request, decoded.files)
    if decoded.raw is not None:
        set_raw_body(request, decoded.raw)


class BodyDecoder:
    format: BodyFormat
    content_type: str

    def __init__(self, limit: int | float | str, content_type: str | None = None):
        self.limit = parse_limit(limit)
        if content_type is not None:
            self.content_type = content_type

    def accepts(self, request: Request) -> bool:
        return has_body(request) and should_parse(request, self.content_type)

    async def decode(self, request: Request) -> Decoded:
        raise NotImplementedError

    async def run(self, request: Request) -> DecodeResult:
        try:
            check_content_length(request.headers, self.limit)
            return await self.decode(request)
        except BodyParserError as exc:
            logger.info(
                "Rejected %s body: %s (%d)",
                self.format.value,
                exc.kind,
                exc.status_code,
            )
            return DecodeFailure.from_error(exc)

    async def __call__(self, request: Request, call_next) -> Response:
        """Use the decoder on its own, as a middleware dispatch function."""
        if not self.accepts(request):
            return await call_next(request)
        result = await self.run(request)
        if isinstance(result, DecodeFailure):
            return result.to_response()
        attach(request, result)
        return await call_next(request)
