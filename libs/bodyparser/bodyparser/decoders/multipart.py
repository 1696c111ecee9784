"""
``multipart/form-data`` decoder.

The body is streamed through :class:`python_multipart.MultipartParser`
under the byte budget.  Limits are enforced from inside the parser
callbacks, while the data arrives:

* at most ``MAX_FIELDS`` parts, each with a name of at most
  ``MAX_NAME_LENGTH`` characters;
* plain values up to ``MAX_VALUE_LENGTH`` bytes, filenames up to
  ``MAX_FILENAME_LENGTH`` characters, files up to ``file_limit`` bytes;
* names, values and files together up to ``limit`` bytes.

Plain values land in a field map, uploads in a separate file map.  Both are
keyed by field name and promote repeated names to lists.
"""

from __future__ import annotations

import re
from contextlib import aclosing
from dataclasses import dataclass, field
from typing import Any

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header
from starlette.requests import Request

from bodyparser.decoders.base import BodyDecoder, BodyFormat, Decoded
from bodyparser.errors import InvalidSyntax, PayloadTooLarge, StructuralLimitExceeded
from bodyparser.limits import parse_limit
from bodyparser.nested import assign, is_denied
from bodyparser.options import MultipartOptions
from bodyparser.reader import iter_bounded

MAX_FIELDS = 100
MAX_NAME_LENGTH = 1000
MAX_VALUE_LENGTH = 100_000
MAX_FILENAME_LENGTH = 255

DEFAULT_FILENAME = "upload"

_SEPARATORS = re.compile(r"[/\\]")


@dataclass(frozen=True)
class FileField:
    filename: str
    original_name: str
    size: int
    declared_type: str
    mime_type: str
    data: bytes = field(repr=False)


def sanitize_filename(name: str) -> str:
    """Strip NUL bytes, ``..``, path separators and leading dots."""
    name = name.replace("\x00", "")
    name = name.replace("..", "")
    name = _SEPARATORS.sub("", name)
    name = name.lstrip(".")
    return name or DEFAULT_FILENAME


def _text(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


class _Part:
    __slots__ = ("name", "filename", "content_type", "data", "skip")

    def __init__(self) -> None:
        self.name = ""
        self.filename: str | None = None
        self.content_type = ""
        self.data = bytearray()
        self.skip = False


class _FormCollector:
    """Parser callbacks that build the field and file maps."""

    def __init__(self, limit: int, file_limit: int, default_file_type: str):
        self.limit = limit
        self.file_limit = file_limit
        self.default_file_type = default_file_type
        self.fields: dict[str, Any] = {}
        self.files: dict[str, Any] = {}
        self.count = 0
        self.total = 0
        self._part = _Part()
        self._headers: dict[bytes, bytes] = {}
        self._header_name = b""
        self._header_value = b""

    def callbacks(self) -> dict[str, Any]:
        return {
            "on_part_begin": self.on_part_begin,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_headers_finished": self.on_headers_finished,
        }

    def on_part_begin(self) -> None:
        self._part = _Part()
        self._headers = {}

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_name += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        self._headers[self._header_name.lower()] = self._header_value
        self._header_name = b""
        self._header_value = b""

    def on_headers_finished(self) -> None:
        part = self._part
        self.count += 1
        if self.count > MAX_FIELDS:
            raise StructuralLimitExceeded("Too many form fields")

        _, options = parse_options_header(self._headers.get(b"content-disposition", b""))
        if b"name" not in options:
            raise InvalidSyntax("Multipart part is missing a field name")
        part.name = _text(options[b"name"])
        if len(part.name) > MAX_NAME_LENGTH:
            raise StructuralLimitExceeded("Field name too long")
        part.skip = is_denied(part.name)

        if b"filename" in options:
            part.filename = _text(options[b"filename"])
            if len(part.filename) > MAX_FILENAME_LENGTH:
                raise StructuralLimitExceeded("Filename too long")
            part.content_type = _text(self._headers.get(b"content-type", b"")).strip()

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        part = self._part
        if part.skip:
            return
        part.data += data[start:end]
        if part.filename is not None:
            if len(part.data) > self.file_limit:
                raise PayloadTooLarge("File too large")
        elif len(part.data) > MAX_VALUE_LENGTH:
            raise StructuralLimitExceeded("Field value too long")

    def on_part_end(self) -> None:
        part = self._part
        if part.skip:
            return
        self.total += len(part.data) + len(part.name.encode("utf-8"))
        if self.total > self.limit:
            raise PayloadTooLarge()

        if part.filename is None:
            assign(self.fields, part.name, _text(part.data))
        else:
            assign(self.files, part.name, self._file(part))

    def _file(self, part: _Part) -> FileField:
        declared = part.content_type or self.default_file_type
        return FileField(
            filename=sanitize_filename(part.filename or ""),
            original_name=part.filename or "",
            size=len(part.data),
            declared_type=declared,
            mime_type=declared.split(";")[0].strip() or declared,
            data=bytes(part.data),
        )


class MultipartDecoder(BodyDecoder):
    format = BodyFormat.MULTIPART
    content_type = "multipart/form-data"

    def __init__(self, options: MultipartOptions | None = None):
        options = options or MultipartOptions()
        super().__init__(options.limit)
        self.file_limit = self.limit if options.file_limit is None else parse_limit(options.file_limit)
        self.default_file_type = options.default_file_type

    async def decode(self, request: Request) -> Decoded:
        _, params = parse_options_header(request.headers.get("content-type"))
        boundary = params.get(b"boundary")
        if not boundary:
            raise InvalidSyntax("Missing multipart boundary")

        collector = _FormCollector(self.limit, self.file_limit, self.default_file_type)
        parser = MultipartParser(boundary, collector.callbacks())
        try:
            async with aclosing(iter_bounded(request, self.limit)) as chunks:
                async for chunk in chunks:
                    parser.write(chunk)
            parser.finalize()
        except MultipartParseError as exc:
            raise InvalidSyntax("Invalid multipart body") from exc

        return Decoded(body=collector.fields, files=collector.files)
