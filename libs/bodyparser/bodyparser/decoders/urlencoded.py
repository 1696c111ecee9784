"""
``application/x-www-form-urlencoded`` decoder.

Pairs are split lazily so the parameter count is enforced as the body is
walked, not after every pair has been materialised.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import Any
from urllib.parse import unquote_plus

from starlette.requests import Request

from bodyparser.decoders.base import BodyDecoder, BodyFormat, Decoded
from bodyparser.errors import MaxNestingExceeded, StructuralLimitExceeded
from bodyparser.nested import assign, insert
from bodyparser.options import URLEncodedOptions
from bodyparser.reader import read_bounded

MAX_PARAMS = 1000
MAX_KEY_LENGTH = 1000
MAX_VALUE_LENGTH = 10000

_SEGMENT = re.compile(r"[^&]+")


def iter_pairs(text: str) -> Iterator[tuple[str, str]]:
    """``a=1&b=x+y`` -> ``("a", "1"), ("b", "x y")``; empty segments skipped."""
    for segment in _SEGMENT.finditer(text):
        name, _, value = segment.group().partition("=")
        yield unquote_plus(name), unquote_plus(value)


class URLEncodedDecoder(BodyDecoder):
    format = BodyFormat.URLENCODED
    content_type = "application/x-www-form-urlencoded"

    def __init__(self, options: URLEncodedOptions | None = None):
        options = options or URLEncodedOptions()
        super().__init__(options.limit)
        self.parse_nested_objects = options.parse_nested_objects is not False

    async def decode(self, request: Request) -> Decoded:
        text = await read_bounded(request, self.limit)
        body: dict[str, Any] = {}

        for count, (key, value) in enumerate(iter_pairs(text), start=1):
            if count > MAX_PARAMS:
                raise StructuralLimitExceeded("Too many parameters")
            if len(key) > MAX_KEY_LENGTH or len(value) > MAX_VALUE_LENGTH:
                raise StructuralLimitExceeded("Parameter too long")

            if self.parse_nested_objects:
                try:
                    insert(body, key, value)
                except MaxNestingExceeded as exc:
                    raise MaxNestingExceeded(f"Invalid parameter structure: {exc.detail}") from exc
            else:
                assign(body, key, value)

        return Decoded(body=body, raw=text)
