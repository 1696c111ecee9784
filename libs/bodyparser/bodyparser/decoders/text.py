"""Plain-text decoder: the body as a string, bounded by the byte budget."""

from __future__ import annotations

from starlette.requests import Request

from bodyparser.decoders.base import BodyDecoder, BodyFormat, Decoded
from bodyparser.options import TextOptions
from bodyparser.reader import read_bounded


class TextDecoder(BodyDecoder):
    format = BodyFormat.TEXT
    content_type = "text/"

    def __init__(self, options: TextOptions | None = None):
        options = options or TextOptions()
        super().__init__(options.limit, options.type)

    async def decode(self, request: Request) -> Decoded:
        text = await read_bounded(request, self.limit)
        return Decoded(body=text, raw=text)
