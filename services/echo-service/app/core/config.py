"""Echo-service configuration loaded from environment."""

from __future__ import annotations

from bodyparser.config import env, env_int, env_limit

SERVICE_NAME = "echo-service"
SERVICE_PORT = env_int("SERVICE_PORT", 8010)

# Comma-separated content types decoded as JSON.
JSON_TYPES = tuple(t.strip() for t in env("ECHO_JSON_TYPES", "application/json").split(",") if t.strip())
UPLOAD_FILE_LIMIT = env_limit("ECHO_UPLOAD_FILE_LIMIT", "5mb")

# Shared secret for HMAC-signed webhook bodies; empty disables the check.
WEBHOOK_SECRET = env("WEBHOOK_SECRET", "")
WEBHOOK_PATH_PREFIX = "/webhooks"
SIGNATURE_HEADER = "X-Signature"
