"""Send pipeline: resolve -> validate -> authenticate -> build -> deliver."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from src.messaging.application.services.message_builder import build_message
from src.messaging.application.services.parameter_resolver import resolve_params, validate_required
from src.messaging.domain.interfaces.external_services import MessageDeliveryClient, TokenProvider
from src.messaging.domain.models import DeliveryResult, ProcessDefaults, RequestParams
from src.shared.logging import get_logger, time_block

logger = get_logger(__name__)


class DispatchService:
    """
    One instance per process; holds only read-only collaborators, so
    concurrent requests can share it.
    """

    def __init__(
        self,
        defaults: ProcessDefaults,
        token_provider: TokenProvider,
        delivery_client: MessageDeliveryClient,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.defaults = defaults
        self.token_provider = token_provider
        self.delivery_client = delivery_client
        self.clock = clock

    async def dispatch(self, params: RequestParams) -> DeliveryResult:
        """
        Run the full pipeline for one request.

        Raises MissingParameter before any network call, then
        TokenExchangeFailed or DeliveryFailed from the adapters. A non-zero
        errcode from the platform is returned, not raised.
        """
        resolved = validate_required(resolve_params(params, self.defaults))
        log = logger.bind(userid=resolved.user_id, template_id=resolved.template_id)

        with time_block("wechat.stable_token", logger=log):
            token = await self.token_provider.fetch_token(resolved.app_id, resolved.secret)

        message = build_message(token, resolved, now=self.clock() if self.clock else None)

        with time_block("wechat.template_send", logger=log):
            result = await self.delivery_client.send_template_message(token, message)

        if result.ok:
            log.info("template_message_sent")
        else:
            log.warning("template_message_rejected", errcode=result.error_code, errmsg=result.error_message)
        return result
