"""
Structured-text (JSON) decoder.

Before the text is handed to :func:`json.loads` its container depth is
measured with a string-aware scan, so a body like ``[[[[...]]]]`` is refused
without recursing into it.  Object keys on the pollution denylist are dropped
at every depth.
"""

from __future__ import annotations

import json
from typing import Any, Callable

from starlette.requests import Request

from bodyparser.decoders.base import BodyDecoder, BodyFormat, Decoded
from bodyparser.errors import InvalidSyntax, MaxNestingExceeded
from bodyparser.nested import is_denied
from bodyparser.options import JSONOptions
from bodyparser.reader import read_bounded

MAX_NESTING = 100


def nesting_depth(text: str, stop_after: int | None = None) -> int:
    """Deepest ``{``/``[`` level in *text*, ignoring brackets inside strings.

    Scanning stops early once the depth passes *stop_after*.
    """
    level = deepest = 0
    in_string = escape = False
    for ch in text:
        if escape:
            escape = False
            continue
        if ch == "\\" and in_string:
            escape = True
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if ch in "{[":
            level += 1
            if level > deepest:
                deepest = level
                if stop_after is not None and deepest > stop_after:
                    break
        elif ch in "}]":
            level -= 1
    return deepest


def _drop_denied_keys(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    return {key: value for key, value in pairs if not is_denied(key)}


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unexpected token {name}")


def loads(text: str) -> Any:
    try:
        return json.loads(text, object_pairs_hook=_drop_denied_keys, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise InvalidSyntax(f"Invalid JSON: {exc.msg}") from exc
    except ValueError as exc:
        raise InvalidSyntax(f"Invalid JSON: {exc}") from exc


def revive(value: Any, reviver: Callable[[Any, Any], Any], key: Any = "") -> Any:
    """Apply *reviver* bottom-up, children before their container.

    Object members are passed with their key, array items with their index,
    and the top-level value with ``""``.
    """
    if isinstance(value, dict):
        value = {k: revive(v, reviver, k) for k, v in value.items()}
    elif isinstance(value, list):
        value = [revive(item, reviver, i) for i, item in enumerate(value)]
    return reviver(key, value)


def is_unframed(request: Request) -> bool:
    return "content-length" not in request.headers and "transfer-encoding" not in request.headers


def has_no_body(request: Request) -> bool:
    """An HTTP/1.x request without framing headers carries no body.

    HTTP/2 and later have no transfer-encoding and may omit content-length,
    so for them the stream is read and an empty one counts as no body.
    """
    if not str(request.scope.get("http_version", "1.1")).startswith("1"):
        return False
    return is_unframed(request)


class JSONDecoder(BodyDecoder):
    format = BodyFormat.JSON
    content_type = "application/json"

    def __init__(self, options: JSONOptions | None = None, content_type: str | None = None):
        options = options or JSONOptions()
        super().__init__(options.limit, content_type or options.type)
        self.strict = options.strict
        self.empty_body = options.empty_body
        self.reviver = options.reviver

    def _empty(self) -> Any:
        return {} if self.empty_body == "empty-object" else None

    async def decode(self, request: Request) -> Decoded:
        if has_no_body(request):
            return Decoded(body=None)

        text = await read_bounded(request, self.limit)
        if not text and is_unframed(request):
            return Decoded(body=None)

        if nesting_depth(text, stop_after=MAX_NESTING) > MAX_NESTING:
            raise MaxNestingExceeded("JSON nesting too deep")

        if not text.strip():
            return Decoded(body=self._empty(), raw=text)

        body = loads(text)
        if self.reviver is not None:
            body = revive(body, self.reviver)
        if self.strict and not isinstance(body, (dict, list)):
            raise InvalidSyntax("JSON body must be an object or array")
        return Decoded(body=body, raw=text)
