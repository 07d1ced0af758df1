# src/messaging/domain/models.py
"""
Messaging Domain Models

Value objects that flow through one /wxsend dispatch:
RequestParams -> AccessToken -> OutboundMessage -> DeliveryResult.
ProcessDefaults is the startup snapshot of per-request fallbacks.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping

# wire name -> attribute name; the wire names are what callers and env/flags use
WIRE_FIELDS: Dict[str, str] = {
    "title": "title",
    "content": "content",
    "appid": "app_id",
    "secret": "secret",
    "userid": "user_id",
    "template_id": "template_id",
    "base_url": "base_url",
    "tz": "timezone",
}

REQUIRED_FIELDS = ("app_id", "secret", "user_id", "template_id")


@dataclass(frozen=True)
class RequestParams:
    """Parameters of a single send request; every field may be empty."""

    title: str = ""
    content: str = ""
    app_id: str = ""
    secret: str = ""
    user_id: str = ""
    template_id: str = ""
    base_url: str = ""
    timezone: str = ""

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> "RequestParams":
        """Build from wire-named keys (query params / JSON body). Missing or None -> ""."""
        values = {}
        for wire, attr in WIRE_FIELDS.items():
            v = data.get(wire)
            values[attr] = "" if v is None else str(v)
        return cls(**values)

    def missing_required(self) -> list[str]:
        """Wire names of required fields that are still empty."""
        wire_by_attr = {attr: wire for wire, attr in WIRE_FIELDS.items()}
        return [wire_by_attr[name] for name in REQUIRED_FIELDS if not getattr(self, name)]

    def merged_with(self, defaults: "ProcessDefaults") -> "RequestParams":
        changes = {
            f.name: getattr(defaults, f.name)
            for f in fields(self)
            if not getattr(self, f.name)
        }
        return replace(self, **changes)


@dataclass(frozen=True)
class ProcessDefaults:
    """Process-wide fallbacks, built once at startup and never mutated."""

    title: str = ""
    content: str = ""
    app_id: str = ""
    secret: str = ""
    user_id: str = ""
    template_id: str = ""
    base_url: str = ""
    timezone: str = ""


@dataclass(frozen=True)
class AccessToken:
    """Bearer token returned by the stable_token exchange."""

    value: str
    expires_in: int = 0

    def __repr__(self) -> str:
        return f"AccessToken(value='***', expires_in={self.expires_in})"


@dataclass(frozen=True)
class OutboundMessage:
    """Template message ready to be posted to the platform."""

    recipient: str
    template_id: str
    detail_url: str
    field_values: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "touser": self.recipient,
            "template_id": self.template_id,
            "url": self.detail_url,
            "data": self.field_values,
        }


@dataclass(frozen=True)
class DeliveryResult:
    """Platform verdict on a delivery; relayed to the caller untouched."""

    error_code: int
    error_message: str

    @property
    def ok(self) -> bool:
        return self.error_code == 0

    def to_payload(self) -> Dict[str, Any]:
        return {"errcode": self.error_code, "errmsg": self.error_message}
