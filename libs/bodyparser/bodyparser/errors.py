"""
Error types for body decoding.

Two families live here:

* configuration errors (:class:`InvalidLimitFormat`, :class:`InvalidLimitType`)
  raised while a decoder is being built, and
* request errors rooted at :class:`BodyParserError`, each carrying the HTTP
  status it maps to.

Request errors never leave a decoder as exceptions: they are turned into a
:class:`DecodeFailure` result, which renders as a short plain-text response
carrying the error's status code.  Nothing beyond a truncated message is
ever echoed back to the client.
"""

from __future__ import annotations

from dataclasses import dataclass

from starlette.responses import PlainTextResponse

MAX_MESSAGE_LENGTH = 100


def truncate(message: str, length: int = MAX_MESSAGE_LENGTH) -> str:
    return message[:length]


def error_response(detail: str, status_code: int = 400) -> PlainTextResponse:
    return PlainTextResponse(truncate(detail), status_code=status_code)


# ── Configuration errors ──────────────────────────────────────────────


class InvalidLimitFormat(ValueError):
    """A size limit string or number that cannot be turned into bytes."""


class InvalidLimitType(TypeError):
    """A size limit that is neither a number nor a string."""


# ── Request errors ────────────────────────────────────────────────────


class BodyParserError(Exception):
    """Generic body decoding error (400)."""

    status_code = 400
    kind = "bad_request"
    default_detail = "Body parsing failed"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class InvalidContentLength(BodyParserError):
    """Malformed ``Content-Length`` header (400)."""

    kind = "invalid_content_length"
    default_detail = "Invalid content-length header"


class PayloadTooLarge(BodyParserError):
    """Body, field or file over its byte budget (413)."""

    status_code = 413
    kind = "payload_too_large"
    default_detail = "Request body size exceeded"


class BodyReadFailed(BodyParserError):
    """The transport failed while the body was being read (400)."""

    kind = "body_read_failed"
    default_detail = "Failed to read request body"


class InvalidSyntax(BodyParserError):
    """Format-specific parse failure (400)."""

    kind = "invalid_syntax"
    default_detail = "Invalid request body"


class MaxNestingExceeded(BodyParserError):
    """Nested keys or JSON containers too deep (400)."""

    kind = "max_nesting_exceeded"
    default_detail = "Maximum nesting depth exceeded"


class StructuralLimitExceeded(BodyParserError):
    """Too many fields, or a key/value/filename too long (400)."""

    kind = "structural_limit_exceeded"
    default_detail = "Request body structure exceeds limits"


class VerificationFailed(BodyParserError):
    """The verification hook rejected the body (400)."""

    kind = "verification_failed"
    default_detail = "Verification failed"


# ── Structured result ─────────────────────────────────────────────────


@dataclass(frozen=True)
class DecodeFailure:
    kind: str
    detail: str
    status_code: int

    @classmethod
    def from_error(cls, exc: BodyParserError) -> DecodeFailure:
        return cls(kind=exc.kind, detail=truncate(exc.detail), status_code=exc.status_code)

    def to_response(self) -> PlainTextResponse:
        return error_response(self.detail, self.status_code)
