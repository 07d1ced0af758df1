"""WeChat Official Account API adapter implementation."""

from typing import Any, Dict

import httpx

from src.messaging.domain.exceptions import DeliveryFailed, TokenExchangeFailed
from src.messaging.domain.interfaces.external_services import MessageDeliveryClient, TokenProvider
from src.messaging.domain.models import AccessToken, DeliveryResult, OutboundMessage
from src.shared.logging import get_logger

logger = get_logger(__name__)

DEFAULT_API_BASE = "https://api.weixin.qq.com"


class WeChatAPIAdapter(TokenProvider, MessageDeliveryClient):
    """
    stable_token exchange + template message delivery on one shared client.

    The client is owned by the caller (the app factory opens and closes it).
    Certificate verification stays at the httpx default (on).
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        token_url: str = f"{DEFAULT_API_BASE}/cgi-bin/stable_token",
        send_url: str = f"{DEFAULT_API_BASE}/cgi-bin/message/template/send",
    ):
        self.client = client
        self.token_url = token_url
        self.send_url = send_url

    async def fetch_token(self, app_id: str, secret: str) -> AccessToken:
        """Exchange appid/secret for an access token (one attempt, no cache)."""
        payload = {
            "grant_type": "client_credential",
            "appid": app_id,
            "secret": secret,
        }
        try:
            response = await self.client.post(self.token_url, json=payload)
            data = self._json_object(response)
        except (httpx.HTTPError, ValueError) as e:
            logger.error("token_exchange_failed", appid=app_id, error=str(e))
            raise TokenExchangeFailed(f"Failed to get access token: {e}") from e

        token = data.get("access_token") or ""
        if not isinstance(token, str) or not token:
            # stable_token reports bad credentials as {errcode, errmsg} with no token
            reason = f"errcode={data.get('errcode')} errmsg={data.get('errmsg')}"
            logger.error("token_exchange_empty", appid=app_id, status=response.status_code, reason=reason)
            raise TokenExchangeFailed(
                f"Failed to get access token: empty access_token ({reason})",
                details={"errcode": data.get("errcode"), "errmsg": data.get("errmsg")},
            )

        try:
            expires_in = int(data.get("expires_in") or 0)
        except (TypeError, ValueError, OverflowError):
            expires_in = 0
        return AccessToken(value=token, expires_in=expires_in)

    async def send_template_message(
        self,
        access_token: AccessToken,
        message: OutboundMessage
    ) -> DeliveryResult:
        """Post the template message; the platform verdict is returned as-is."""
        try:
            response = await self.client.post(
                self.send_url,
                params={"access_token": access_token.value},
                json=message.to_payload(),
            )
            data = self._json_object(response)
            result = DeliveryResult(
                error_code=int(data.get("errcode") or 0),
                error_message=str(data.get("errmsg") or ""),
            )
        except (httpx.HTTPError, ValueError, TypeError, OverflowError) as e:
            logger.error("template_send_failed", touser=message.recipient, error=str(e))
            raise DeliveryFailed(f"Failed to send template message: {e}") from e

        if response.is_error:
            logger.warning("template_send_http_status", status=response.status_code, errcode=result.error_code)
        return result

    @staticmethod
    def _json_object(response: httpx.Response) -> Dict[str, Any]:
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        return data
