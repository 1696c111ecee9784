"""Signed webhook receiver.

The parser only runs the signature hook on a decoded body, so a delivery
that decodes to nothing is refused here: 415 for a non-JSON content type,
400 for a JSON request without an object body.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from bodyparser import get_body, should_parse
from bodyparser.errors import error_response
from app.api.schemas import WebhookAck
from app.core.config import JSON_TYPES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/events", response_model=WebhookAck, status_code=202)
async def receive_event(request: Request):
    if not any(should_parse(request, t) for t in (*JSON_TYPES, "application/json")):
        logger.warning("Rejected webhook with content type %r", request.headers.get("content-type"))
        return error_response("Webhook events must be JSON", 415)

    body = get_body(request)
    if not isinstance(body, dict):
        logger.warning("Rejected webhook without a JSON object body")
        return error_response("Webhook event must be a JSON object", 400)

    event = body.get("event")
    if not isinstance(event, str):
        event = None
    logger.info("Webhook accepted", extra={"event": event})
    return WebhookAck(event=event)
