"""Echo endpoints: return whatever the body parser decoded."""

from __future__ import annotations

import hashlib
from typing import Any

from fastapi import APIRouter, Request

from bodyparser import FileField, get_body, get_files
from app.api.schemas import EchoResponse, FileInfo

router = APIRouter(prefix="/echo", tags=["echo"])


def _file_infos(files: dict[str, Any]) -> list[FileInfo]:
    infos = []
    for name, value in files.items():
        uploads: list[FileField] = value if isinstance(value, list) else [value]
        for upload in uploads:
            infos.append(
                FileInfo(
                    field=name,
                    filename=upload.filename,
                    original_name=upload.original_name,
                    size=upload.size,
                    mime_type=upload.mime_type,
                    sha256=hashlib.sha256(upload.data).hexdigest(),
                )
            )
    return infos


@router.api_route("", methods=["POST", "PUT", "PATCH"], response_model=EchoResponse)
async def echo(request: Request):
    return EchoResponse(
        method=request.method,
        content_type=request.headers.get("content-type"),
        body=get_body(request),
        files=_file_infos(get_files(request)),
    )
