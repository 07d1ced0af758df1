# src/messaging/domain/exceptions.py
"""
Messaging Domain Exceptions

Every error here is terminal for the request that raised it.
"""
from __future__ import annotations

from fastapi import status

from src.shared.exceptions import DomainError


class MessagingDomainError(DomainError):
    """Base exception for messaging dispatch errors."""
    code = "messaging_error"


class MalformedInput(MessagingDomainError):
    """Raised when a POST body cannot be decoded into request parameters."""
    code = "malformed_input"
    status_code = status.HTTP_400_BAD_REQUEST


class MissingParameter(MessagingDomainError):
    """Raised when a required field is still empty after defaults are applied."""
    code = "missing_parameter"
    status_code = status.HTTP_400_BAD_REQUEST


class TokenExchangeFailed(MessagingDomainError):
    code = "token_exchange_failed"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class DeliveryFailed(MessagingDomainError):
    code = "delivery_failed"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
