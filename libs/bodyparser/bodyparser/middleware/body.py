"""
Body-decoding middleware for Starlette / FastAPI.

Runs a :class:`~bodyparser.parser.BodyParser` in front of every route.  Route
handlers read the result from ``request.state.body`` (and
``request.state.files`` for multipart uploads).  Oversized and malformed
payloads are answered with 413 / 400 before any handler runs.
"""

from __future__ import annotations

from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from bodyparser.options import BodyParserOptions
from bodyparser.parser import BodyParser


class BodyParserMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, options: BodyParserOptions | None = None, **kwargs: Any):
        super().__init__(app)
        self.parser = BodyParser(options or BodyParserOptions(**kwargs))

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        return await self.parser(request, call_next)
