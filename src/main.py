from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from src.config import Settings, get_settings
from src.dependencies import build_dispatch_service, build_http_client
from src.shared.exceptions import register_exception_handlers
from src.shared.logging import get_logger, setup_logging
from src.shared.middleware import CorrelationIdMiddleware, RequestLoggingMiddleware

from src.messaging.api.routes.wxsend import router as wxsend_router
from src.messaging.api.routes.detail import router as detail_router
from src.shared.health import router as health_router

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Application factory.

    `settings` defaults to the environment-loaded singleton; `transport`
    replaces the outbound network layer (tests pass an httpx.MockTransport).
    """
    settings = settings or get_settings()
    setup_logging(settings)

    client = build_http_client(transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("wxpush_started", port=settings.PORT, environment=settings.ENVIRONMENT)
        yield
        await client.aclose()

    app = FastAPI(
        title="wxpush: WeChat template message bridge",
        version=settings.PROJECT_VERSION,
        lifespan=lifespan,
    )

    # Read-only for the lifetime of the process
    app.state.settings = settings
    app.state.dispatch_service = build_dispatch_service(settings, client)

    app.add_middleware(RequestLoggingMiddleware, service=settings.PROJECT_NAME, env=settings.ENVIRONMENT)
    app.add_middleware(CorrelationIdMiddleware)

    # Routers
    app.include_router(wxsend_router)
    app.include_router(detail_router)
    app.include_router(health_router)

    # Centralized error handling → {"error": "<message>"}
    register_exception_handlers(app)

    # Root endpoint
    @app.get("/", tags=["Root"], response_class=PlainTextResponse)
    async def root():
        return "wxpush is running...✅"

    return app
