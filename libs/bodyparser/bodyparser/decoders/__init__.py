from bodyparser.decoders.base import BodyDecoder, BodyFormat, Decoded, attach
from bodyparser.decoders.json import JSONDecoder
from bodyparser.decoders.multipart import FileField, MultipartDecoder, sanitize_filename
from bodyparser.decoders.text import TextDecoder
from bodyparser.decoders.urlencoded import URLEncodedDecoder

__all__ = [
    "BodyDecoder",
    "BodyFormat",
    "Decoded",
    "attach",
    "JSONDecoder",
    "TextDecoder",
    "URLEncodedDecoder",
    "MultipartDecoder",
    "FileField",
    "sanitize_filename",
]
