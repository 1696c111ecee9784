"""
Helpers around the Starlette request: which requests carry a body, and
where decoded values are kept.

Decoded values live on ``request.state`` (``body`` and ``files``) so route
handlers behind the middleware can read them.  The raw body text is kept in
the ASGI scope instead, wrapped in :class:`RawBody`, so it does not show up
when the state namespace is dumped, logged or serialised.
"""

from __future__ import annotations

from typing import Any

from starlette.requests import Request

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})

RAW_BODY_KEY = "bodyparser.raw_body"


class RawBody:
    """Opaque holder for the raw body text."""

    __slots__ = ("_text",)

    def __init__(self, text: str):
        self._text = text

    def __repr__(self) -> str:
        return f"<RawBody: {len(self._text)} chars>"

    __str__ = __repr__

    @property
    def text(self) -> str:
        return self._text


def has_body(request: Request) -> bool:
    return request.method.upper() in BODY_METHODS


def content_type_of(request: Request) -> str:
    return (request.headers.get("content-type") or "").lower()


def should_parse(request: Request, content_type: str) -> bool:
    current = content_type_of(request)
    return bool(current) and content_type.lower() in current


def set_body(request: Request, body: Any) -> None:
    request.state.body = body


def set_files(request: Request, files: dict[str, Any]) -> None:
    request.state.files = files


def set_raw_body(request: Request, text: str) -> None:
    request.scope[RAW_BODY_KEY] = RawBody(text)


def get_body(request: Request) -> Any:
    return getattr(request.state, "body", None)


def get_files(request: Request) -> dict[str, Any]:
    return getattr(request.state, "files", {})


def get_raw_body(request: Request) -> str | None:
    raw = request.scope.get(RAW_BODY_KEY)
    return raw.text if raw is not None else None
