"""Send request DTO using Pydantic v2."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from src.messaging.domain.models import RequestParams


class SendMessageRequest(BaseModel):
    """POST /wxsend body. Every field is optional; unknown keys are ignored."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: Optional[StrictStr] = Field(None, description="Message title")
    content: Optional[StrictStr] = Field(None, description="Message body")
    app_id: Optional[StrictStr] = Field(None, alias="appid", description="Official account AppID")
    secret: Optional[StrictStr] = Field(None, description="AppSecret")
    user_id: Optional[StrictStr] = Field(None, alias="userid", description="Recipient openid")
    template_id: Optional[StrictStr] = Field(None, description="Template ID")
    base_url: Optional[StrictStr] = Field(None, description="Base URL of the detail page")
    timezone: Optional[StrictStr] = Field(None, alias="tz", description="IANA time zone for the detail timestamp")

    def to_params(self) -> RequestParams:
        return RequestParams.from_wire(self.model_dump(by_alias=True))
