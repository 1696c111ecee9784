"""Pydantic response schemas for the echo service."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class FileInfo(BaseModel):
    field: str
    filename: str
    original_name: str
    size: int
    mime_type: str
    sha256: str


class EchoResponse(BaseModel):
    method: str
    content_type: str | None = None
    body: Any = None
    files: list[FileInfo] = Field(default_factory=list)


class WebhookAck(BaseModel):
    accepted: bool = True
    event: str | None = None
