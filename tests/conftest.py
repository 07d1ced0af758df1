import json
from typing import Any, Callable, List, Union

import httpx
import pytest
from fastapi.testclient import TestClient

from src.config import Settings
from src.main import create_app

Reply = Union[dict, Exception, httpx.Response, Callable[[httpx.Request], httpx.Response]]


def make_settings(**overrides: Any) -> Settings:
    """Settings isolated from the host environment and any .env file."""
    values = dict(
        ENV="test",
        LOG_LEVEL="WARNING",
        LOG_FORMAT="console",
        WECHAT_API_BASE="https://api.weixin.qq.com",
        TITLE="",
        CONTENT="",
        APPID="",
        SECRET="",
        USERID="",
        TEMPLATE_ID="",
        BASE_URL="",
        WXPUSH_TZ="Asia/Shanghai",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeWeChat:
    """Stands in for api.weixin.qq.com; records every outbound request."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.token_reply: Reply = {"access_token": "tok", "expires_in": 3600}
        self.send_reply: Reply = {"errcode": 0, "errmsg": "ok"}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/cgi-bin/stable_token"):
            return self._answer(self.token_reply, request)
        if request.url.path.endswith("/cgi-bin/message/template/send"):
            return self._answer(self.send_reply, request)
        return httpx.Response(404, json={"errcode": -1, "errmsg": "unknown path"})

    @staticmethod
    def _answer(reply: Reply, request: httpx.Request) -> httpx.Response:
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, httpx.Response):
            return reply
        if callable(reply):
            return reply(request)
        return httpx.Response(200, json=reply)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls_to(self, suffix: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(suffix)]

    @property
    def token_calls(self) -> List[httpx.Request]:
        return self.calls_to("/cgi-bin/stable_token")

    @property
    def send_calls(self) -> List[httpx.Request]:
        return self.calls_to("/cgi-bin/message/template/send")

    @staticmethod
    def body(request: httpx.Request) -> dict:
        return json.loads(request.content)


@pytest.fixture
def wechat() -> FakeWeChat:
    return FakeWeChat()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def client(settings: Settings, wechat: FakeWeChat) -> TestClient:
    return TestClient(create_app(settings, transport=wechat.transport))


@pytest.fixture
def make_client(wechat: FakeWeChat) -> Callable[..., TestClient]:
    """Client factory for tests that need their own process defaults."""
    def _make(**overrides: Any) -> TestClient:
        return TestClient(create_app(make_settings(**overrides), transport=wechat.transport))
    return _make
