"""Bounded, format-aware HTTP request body decoding for Starlette / FastAPI."""

from bodyparser.decoders import FileField, JSONDecoder, MultipartDecoder, TextDecoder, URLEncodedDecoder
from bodyparser.errors import InvalidLimitFormat, InvalidLimitType
from bodyparser.limits import parse_limit
from bodyparser.middleware import BodyParserMiddleware
from bodyparser.options import BodyParserOptions
from bodyparser.parser import BodyParser, create_body_parser
from bodyparser.request import get_body, get_files, get_raw_body, has_body, should_parse

__all__ = [
    "BodyParser",
    "BodyParserMiddleware",
    "BodyParserOptions",
    "create_body_parser",
    "parse_limit",
    "has_body",
    "should_parse",
    "get_body",
    "get_files",
    "get_raw_body",
    "JSONDecoder",
    "TextDecoder",
    "URLEncodedDecoder",
    "MultipartDecoder",
    "FileField",
    "InvalidLimitFormat",
    "InvalidLimitType",
]
