"""External service interfaces."""

from abc import ABC, abstractmethod

from src.messaging.domain.models import AccessToken, DeliveryResult, OutboundMessage


class TokenProvider(ABC):
    """Exchanges app credentials for a short-lived bearer token."""

    @abstractmethod
    async def fetch_token(self, app_id: str, secret: str) -> AccessToken:
        """Fetch a fresh token; raises TokenExchangeFailed."""
        pass


class MessageDeliveryClient(ABC):
    """Posts a template message to the platform."""

    @abstractmethod
    async def send_template_message(
        self,
        access_token: AccessToken,
        message: OutboundMessage
    ) -> DeliveryResult:
        """Deliver a message; raises DeliveryFailed."""
        pass
