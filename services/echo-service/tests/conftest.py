"""Test fixtures for echo-service."""

import os

import pytest

os.environ["LOG_FORMAT"] = "text"
os.environ["WEBHOOK_SECRET"] = "test-secret"
os.environ["ECHO_UPLOAD_FILE_LIMIT"] = "1kb"
os.environ["ECHO_JSON_TYPES"] = "application/json,application/vnd.api+json"

from fastapi.testclient import TestClient

from app.main import app


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
