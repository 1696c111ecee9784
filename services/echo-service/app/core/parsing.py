"""
Body parser wiring for the echo service.

Webhook routes carry an HMAC-SHA256 signature of the raw body in
``X-Signature``.  The check runs inside the parser's verification hook,
which only fires for a decoded body; the webhook route refuses requests that
decode to nothing.  Other paths are not signed.
"""

from __future__ import annotations

import hashlib
import hmac
import logging

from starlette.requests import Request

from bodyparser import BodyParserOptions
from app.core.config import JSON_TYPES, SIGNATURE_HEADER, UPLOAD_FILE_LIMIT, WEBHOOK_PATH_PREFIX, WEBHOOK_SECRET

logger = logging.getLogger(__name__)


def sign(raw: bytes, secret: str = WEBHOOK_SECRET) -> str:
    return hmac.new(secret.encode("utf-8"), raw, hashlib.sha256).hexdigest()


def verify_webhook_signature(request: Request, raw: str) -> None:
    if not WEBHOOK_SECRET or not request.url.path.startswith(WEBHOOK_PATH_PREFIX):
        return

    provided = request.headers.get(SIGNATURE_HEADER, "")
    if not provided:
        raise ValueError("missing signature")
    if not hmac.compare_digest(sign(raw.encode("utf-8")), provided):
        logger.warning("Rejected webhook with bad signature on %s", request.url.path)
        raise ValueError("signature mismatch")


def body_parser_options() -> BodyParserOptions:
    return BodyParserOptions(
        json_types=JSON_TYPES,
        multipart={"file_limit": UPLOAD_FILE_LIMIT},
        verify=verify_webhook_signature,
    )
