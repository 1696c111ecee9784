"""
Body parser entry point.

:class:`BodyParser` picks a decoder by content type, attaches the decoded
value to the request, runs the optional verification hook and then hands
over to ``call_next``.  Per request it moves through these steps:

1. no body expected (method, or no content type)  -> ``body = None``
2. a custom JSON parser matches ``json_types``    -> bounded read + parser
3. built-in dispatch, first match wins: ``json_types``, ``application/json``,
   ``application/x-www-form-urlencoded``, ``multipart/form-data``, ``text/``
4. nothing matched                                -> ``body = None``
5. verification hook (skipped when the body is ``None``)
6. errors: decoder failures are returned as-is; anything unexpected goes to
   ``on_error`` or becomes a truncated 400.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from starlette.requests import Request
from starlette.responses import Response

from bodyparser.decoders import (
    BodyDecoder,
    Decoded,
    JSONDecoder,
    MultipartDecoder,
    TextDecoder,
    URLEncodedDecoder,
    attach,
)
from bodyparser.decoders.base import DecodeResult
from bodyparser.errors import (
    BodyParserError,
    DecodeFailure,
    VerificationFailed,
    error_response,
)
from bodyparser.options import BodyParserOptions
from bodyparser.reader import check_content_length, read_bounded
from bodyparser.request import content_type_of, get_body, get_raw_body, has_body, set_body

logger = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _matches(content_type: str, families: tuple[str, ...]) -> bool:
    return any(family.lower() in content_type for family in families)


class BodyParser:
    def __init__(self, options: BodyParserOptions | None = None):
        self.options = options or BodyParserOptions()
        opts = self.options

        self.json_decoder = JSONDecoder(opts.resolved_json())
        text_decoder = TextDecoder(opts.resolved_text())

        # Ordered dispatch table, first match wins.
        self.decoders: tuple[tuple[tuple[str, ...], BodyDecoder], ...] = (
            (opts.json_types, self.json_decoder),
            ((JSONDecoder.content_type,), self.json_decoder),
            ((URLEncodedDecoder.content_type,), URLEncodedDecoder(opts.resolved_urlencoded())),
            ((MultipartDecoder.content_type,), MultipartDecoder(opts.resolved_multipart())),
            ((text_decoder.content_type,), text_decoder),
        )

        # Caller-supplied decoders, consulted before the built-ins.
        self.custom: tuple[tuple[tuple[str, ...], Callable[[str], Any]], ...] = ()
        if opts.json_parser is not None:
            self.custom = ((opts.json_types, opts.json_parser),)

    def decoder_for(self, content_type: str) -> BodyDecoder | None:
        for families, decoder in self.decoders:
            if _matches(content_type, families):
                return decoder
        return None

    async def __call__(self, request: Request, call_next: CallNext) -> Response:
        content_type = content_type_of(request)
        if not has_body(request) or not content_type:
            set_body(request, None)
            return await call_next(request)

        try:
            result = await self._decode(request, content_type)
        except Exception as exc:
            return await self._handle_fault(exc, request, call_next)

        if isinstance(result, DecodeFailure):
            return result.to_response()

        if result is None:
            set_body(request, None)
        else:
            attach(request, result)

        if self.options.verify is not None and get_body(request) is not None:
            failure = await self._verify(request)
            if failure is not None:
                return failure.to_response()

        return await call_next(request)

    async def _decode(self, request: Request, content_type: str) -> DecodeResult | None:
        for families, parse in self.custom:
            if _matches(content_type, families):
                return await self._run_custom(request, parse)

        decoder = self.decoder_for(content_type)
        if decoder is None:
            logger.debug("No decoder for content type %r", content_type)
            return None
        logger.debug("Decoding %s body", decoder.format.value)
        return await decoder.run(request)

    async def _run_custom(self, request: Request, parse: Callable[[str], Any]) -> DecodeResult:
        limit = self.json_decoder.limit
        try:
            check_content_length(request.headers, limit)
            text = await read_bounded(request, limit)
        except BodyParserError as exc:
            return DecodeFailure.from_error(exc)
        body = await _maybe_await(parse(text))
        return Decoded(body=body, raw=text)

    async def _verify(self, request: Request) -> DecodeFailure | None:
        try:
            await _maybe_await(self.options.verify(request, get_raw_body(request) or ""))
        except Exception as exc:
            message = str(exc)
            logger.info("Verification hook rejected body on %s %s", request.method, request.url.path)
            error = VerificationFailed(f"Verification failed: {message}" if message else None)
            return DecodeFailure.from_error(error)
        return None

    async def _handle_fault(self, exc: Exception, request: Request, call_next: CallNext) -> Response:
        logger.warning(
            "Body decoding failed on %s %s",
            request.method,
            request.url.path,
            exc_info=True,
        )
        if self.options.on_error is not None:
            return await _maybe_await(self.options.on_error(exc, request, call_next))
        return error_response(str(exc) or "Body parsing failed", 400)


def create_body_parser(options: BodyParserOptions | None = None, **kwargs: Any) -> BodyParser:
    """Build a :class:`BodyParser` from options or keyword arguments.

    Keyword arguments accept both spellings, e.g. ``json_types=`` or
    ``jsonTypes=``.
    """
    if options is None:
        options = BodyParserOptions(**kwargs)
    return BodyParser(options)
