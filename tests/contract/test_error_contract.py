import httpx
import pytest
from fastapi.testclient import TestClient

REQUIRED = {"appid": "A", "secret": "S", "userid": "U", "template_id": "T"}


def _assert_contract(r, status: int):
    assert r.status_code == status
    data = r.json()
    assert set(data.keys()) == {"error"}
    assert isinstance(data["error"], str) and "\n" not in data["error"]


def test_malformed_input_contract(client: TestClient):
    _assert_contract(client.post("/wxsend", content=b"{", headers={"Content-Type": "application/json"}), 400)


def test_missing_parameter_contract(client: TestClient):
    _assert_contract(client.get("/wxsend"), 400)


@pytest.mark.parametrize("failure", ["token", "delivery"])
def test_upstream_failure_contract(client: TestClient, wechat, failure):
    if failure == "token":
        wechat.token_reply = httpx.ConnectError("refused")
    else:
        wechat.send_reply = httpx.Response(200, text="oops")
    _assert_contract(client.get("/wxsend", params=REQUIRED), 500)


def test_success_body_is_platform_verdict_only(client: TestClient, wechat):
    wechat.send_reply = {"errcode": 0, "errmsg": "ok", "msgid": 200228332}
    r = client.get("/wxsend", params=REQUIRED)
    assert r.status_code == 200
    assert r.json() == {"errcode": 0, "errmsg": "ok"}
