# src/dependencies.py
from __future__ import annotations

from typing import Optional

import httpx
from fastapi import Request

from src.config import Settings
from src.messaging.application.services.dispatch_service import DispatchService
from src.messaging.infrastructure.adapters.wechat_adapter import WeChatAPIAdapter


def build_http_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """Shared outbound client. Default httpx timeout and TLS verification apply."""
    return httpx.AsyncClient(transport=transport)


def build_dispatch_service(settings: Settings, client: httpx.AsyncClient) -> DispatchService:
    """Wire the send pipeline; ProcessDefaults is snapshotted here, once."""
    adapter = WeChatAPIAdapter(
        client,
        token_url=settings.token_endpoint,
        send_url=settings.delivery_endpoint,
    )
    return DispatchService(
        defaults=settings.process_defaults(),
        token_provider=adapter,
        delivery_client=adapter,
    )


def get_dispatch_service(request: Request) -> DispatchService:
    return request.app.state.dispatch_service
