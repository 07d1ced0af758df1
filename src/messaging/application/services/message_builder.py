"""Template message construction (detail link + template fields)."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional
from urllib.parse import quote_plus
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from src.messaging.domain.models import AccessToken, OutboundMessage, RequestParams
from src.shared.logging import get_logger

logger = get_logger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DETAIL_PATH = "/detail"


def resolve_timezone(name: str) -> Optional[tzinfo]:
    """
    IANA zone for `name`, or None for the process's local zone.

    Unknown, malformed or empty names fall back silently.
    """
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        # OSError: directory keys such as "America", over-long names
        logger.debug("timezone_fallback_to_local", requested=name)
        return None


def format_timestamp(moment: datetime, zone: Optional[tzinfo]) -> str:
    # astimezone(None) converts to the local zone
    return moment.astimezone(zone).strftime(TIMESTAMP_FORMAT)


def build_detail_url(base_url: str, title: str, content: str, timestamp: str) -> str:
    """Link to the detail page; every value is form-escaped (space -> '+')."""
    return (
        f"{base_url}{DETAIL_PATH}"
        f"?title={quote_plus(title)}"
        f"&message={quote_plus(content)}"
        f"&date={quote_plus(timestamp)}"
    )


def build_message(
    token: AccessToken,
    params: RequestParams,
    now: Optional[datetime] = None,
) -> OutboundMessage:
    """
    Build the outbound template message for already-resolved params.

    `token` is not embedded in the message body; it is accepted so the
    builder sits at the same step of the pipeline as delivery.
    `now` defaults to the current instant; naive values are taken as local time.
    """
    moment = now or datetime.now().astimezone()
    if moment.tzinfo is None:
        moment = moment.astimezone()
    timestamp = format_timestamp(moment, resolve_timezone(params.timezone))

    return OutboundMessage(
        recipient=params.user_id,
        template_id=params.template_id,
        detail_url=build_detail_url(params.base_url, params.title, params.content, timestamp),
        field_values={
            "title": {"value": params.title},
            "content": {"value": params.content},
        },
    )
