"""Test fixtures for the body parser."""

import os

os.environ["LOG_FORMAT"] = "text"

import pytest
from unittest.mock import AsyncMock

from starlette.requests import Request
from starlette.responses import PlainTextResponse

from helpers import build_request


@pytest.fixture
def make_request():
    def _make(**kwargs) -> Request:
        request, _ = build_request(**kwargs)
        return request

    return _make


@pytest.fixture
def call_next():
    return AsyncMock(return_value=PlainTextResponse("ok"))
