"""Request builders shared by the body parser tests."""

from starlette.requests import Request

BOUNDARY = "boundary123"


class ScriptedReceive:
    """ASGI ``receive`` that hands out the given chunks one message at a time."""

    def __init__(self, chunks: list[bytes], disconnect_after: int | None = None):
        self.chunks = list(chunks)
        self.disconnect_after = disconnect_after
        self.pulls = 0
        self.bytes_pulled = 0

    async def __call__(self):
        if self.disconnect_after is not None and self.pulls >= self.disconnect_after:
            return {"type": "http.disconnect"}
        index = self.pulls
        self.pulls += 1
        if index >= len(self.chunks):
            return {"type": "http.request", "body": b"", "more_body": False}
        chunk = self.chunks[index]
        self.bytes_pulled += len(chunk)
        return {"type": "http.request", "body": chunk, "more_body": index < len(self.chunks) - 1}


def build_request(
    method: str = "POST",
    body: bytes | str | None = b"",
    content_type: str | None = "application/json",
    headers: dict[str, str] | None = None,
    chunks: list[bytes] | None = None,
    content_length: bool = True,
    disconnect_after: int | None = None,
    http_version: str = "1.1",
    framing: bool = True,
) -> tuple[Request, ScriptedReceive]:
    if isinstance(body, str):
        body = body.encode("utf-8")
    if chunks is None:
        chunks = [body] if body else []

    raw_headers: dict[str, str] = {}
    if content_type is not None:
        raw_headers["content-type"] = content_type
    if body is not None and framing:
        if content_length:
            raw_headers["content-length"] = str(sum(len(c) for c in chunks))
        else:
            raw_headers["transfer-encoding"] = "chunked"
    raw_headers.update({k.lower(): v for k, v in (headers or {}).items()})

    scope = {
        "type": "http",
        "http_version": http_version,
        "method": method,
        "scheme": "http",
        "server": ("testserver", 80),
        "path": "/api/data",
        "root_path": "",
        "query_string": b"",
        "headers": [(k.encode("latin-1"), v.encode("latin-1")) for k, v in raw_headers.items()],
    }
    receive = ScriptedReceive(chunks, disconnect_after=disconnect_after)
    return Request(scope, receive), receive


def multipart_body(parts: list[dict], boundary: str = BOUNDARY) -> str:
    """Join parts (``name``, ``value``, optional ``filename`` / ``type``) into a body."""
    lines = []
    for part in parts:
        lines.append(f"--{boundary}")
        disposition = f'Content-Disposition: form-data; name="{part["name"]}"'
        if "filename" in part:
            disposition += f'; filename="{part["filename"]}"'
        lines.append(disposition)
        if "type" in part:
            lines.append(f"Content-Type: {part['type']}")
        lines.append("")
        lines.append(part.get("value", ""))
    lines.append(f"--{boundary}--")
    return "\r\n".join(lines)
