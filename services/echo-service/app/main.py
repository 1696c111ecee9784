"""Echo-service – FastAPI application entry-point."""

from __future__ import annotations

from fastapi import FastAPI

from app.api.routers.echo import router as echo_router
from app.api.routers.health import router as health_router
from app.api.routers.webhooks import router as webhooks_router
from app.core.logging import init_logging
from app.core.parsing import body_parser_options
from bodyparser import BodyParserMiddleware

init_logging()

app = FastAPI(
    title="Echo Service",
    description="Decode request bodies and echo them back",
    version="0.1.0",
)

app.add_middleware(BodyParserMiddleware, options=body_parser_options())

app.include_router(health_router)
app.include_router(echo_router)
app.include_router(webhooks_router)
