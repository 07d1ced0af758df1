# src/shared/middleware.py
from __future__ import annotations

import time
import uuid

from fastapi import Request
from starlette.types import ASGIApp, Receive, Scope, Send

from src.shared.logging import bind_request_context, clear_request_context, get_logger, set_correlation_id

logger = get_logger("http")


class CorrelationIdMiddleware:
    """
    Ensures every request has a correlation id.
    - Reads from X-Correlation-ID if provided, otherwise generates one.
    - Exposes request.state.correlation_id and binds it into the log context.
    - Echoes X-Correlation-ID in response headers.
    """
    def __init__(self, app: ASGIApp, header_name: str = "X-Correlation-ID"):
        self.app = app
        self.header_name = header_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive=receive)
        corr = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.correlation_id = corr

        clear_request_context()
        set_correlation_id(corr)
        bind_request_context(
            path=scope.get("path"),
            method=scope.get("method"),
            client_ip=request.client.host if request.client else None,
        )

        async def send_wrapper(message):
            if message.get("type") == "http.response.start":
                headers = list(message.get("headers") or [])
                headers.append((self.header_name.encode(), corr.encode()))
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            clear_request_context()


class RequestLoggingMiddleware:
    """
    Lightweight request timing + structured logging.
    - Logs start/finish with method, path, status, duration_ms.
    """
    def __init__(self, app: ASGIApp, service: str = "wxpush", env: str = "dev"):
        self.app = app
        self.service = service
        self.env = env

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        logger.info("http_request_started", service=self.service, env=self.env)

        async def send_wrapper(message):
            if message.get("type") == "http.response.start":
                duration_ms = int((time.perf_counter() - start) * 1000)
                logger.info(
                    "http_request_completed",
                    status=message.get("status"),
                    duration_ms=duration_ms,
                    service=self.service,
                    env=self.env,
                )
            await send(message)

        await self.app(scope, receive, send_wrapper)
