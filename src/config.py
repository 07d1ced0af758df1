# src/config.py

from functools import lru_cache
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from src.messaging.domain.models import ProcessDefaults


class Settings(BaseSettings):
    """
    Central application settings (Pydantic v2).

    - Aliases match the .env / environment keys:
      TITLE, CONTENT, APPID, SECRET, USERID, TEMPLATE_ID, BASE_URL,
      WXPUSH_TZ, PORT, HOST, ENV, LOG_LEVEL, LOG_FORMAT, WECHAT_API_BASE
    - Keyword overrides use the same keys (the CLI passes flags this way).
    """

    # ------------------------------------------------------------------------------------
    # App / API
    # ------------------------------------------------------------------------------------
    PROJECT_NAME: str = Field(default="wxpush", alias="APP_NAME")
    ENVIRONMENT: str = Field(default="dev", alias="ENV")  # dev|staging|prod
    PROJECT_VERSION: str = Field(default="1.0.0")
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=5566)

    # ------------------------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------------------------
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: Optional[str] = Field(default=None)  # json|console; None => by environment

    # ------------------------------------------------------------------------------------
    # WeChat platform
    # ------------------------------------------------------------------------------------
    WECHAT_API_BASE: str = Field(default="https://api.weixin.qq.com")

    # ------------------------------------------------------------------------------------
    # Per-request fallbacks (overridable on every /wxsend call)
    # ------------------------------------------------------------------------------------
    TITLE: str = Field(default="")
    CONTENT: str = Field(default="")
    APPID: str = Field(default="")
    SECRET: str = Field(default="")
    USERID: str = Field(default="")
    TEMPLATE_ID: str = Field(default="")
    BASE_URL: str = Field(default="")
    TZ_NAME: str = Field(default="Asia/Shanghai", alias="WXPUSH_TZ")

    @field_validator("PORT", mode="before")
    @classmethod
    def _empty_port_means_default(cls, v: Any) -> Any:
        # PORT="" is common on PaaS templates
        if v is None or (isinstance(v, str) and v.strip() == ""):
            return 5566
        return v

    # ------------------------------------------------------------------------------------
    # Helper properties
    # ------------------------------------------------------------------------------------
    @property
    def is_dev(self) -> bool:
        return self.ENVIRONMENT.lower() in {"dev", "development", "local"}

    @property
    def is_staging(self) -> bool:
        return self.ENVIRONMENT.lower() in {"stage", "staging"}

    @property
    def is_prod(self) -> bool:
        return self.ENVIRONMENT.lower() in {"prod", "production"}

    @property
    def log_format(self) -> Optional[str]:
        return self.LOG_FORMAT.lower() if self.LOG_FORMAT else None

    @property
    def log_level(self) -> str:
        return self.LOG_LEVEL

    @property
    def token_endpoint(self) -> str:
        return f"{self.WECHAT_API_BASE.rstrip('/')}/cgi-bin/stable_token"

    @property
    def delivery_endpoint(self) -> str:
        return f"{self.WECHAT_API_BASE.rstrip('/')}/cgi-bin/message/template/send"

    def process_defaults(self) -> ProcessDefaults:
        """Snapshot the per-request fallbacks; taken once at startup."""
        return ProcessDefaults(
            title=self.TITLE,
            content=self.CONTENT,
            app_id=self.APPID,
            secret=self.SECRET,
            user_id=self.USERID,
            template_id=self.TEMPLATE_ID,
            base_url=self.BASE_URL,
            timezone=self.TZ_NAME,
        )

    # ------------------------------------------------------------------------------------
    # Pydantic v2 settings config
    # ------------------------------------------------------------------------------------
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "populate_by_name": True,   # enable aliases
        "extra": "ignore",          # don't crash on unrelated env keys
    }


@lru_cache()
def get_settings() -> Settings:
    return Settings()
