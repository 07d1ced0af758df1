from src.config import Settings
from src.messaging.domain.models import ProcessDefaults

ENV_KEYS = ["TITLE", "CONTENT", "APPID", "SECRET", "USERID", "TEMPLATE_ID", "BASE_URL", "WXPUSH_TZ", "PORT", "ENV", "WECHAT_API_BASE"]


def _clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults(monkeypatch):
    _clean_env(monkeypatch)
    s = Settings(_env_file=None)
    assert s.PORT == 5566
    assert s.TZ_NAME == "Asia/Shanghai"
    assert s.APPID == ""
    assert s.is_dev
    assert s.token_endpoint == "https://api.weixin.qq.com/cgi-bin/stable_token"
    assert s.delivery_endpoint == "https://api.weixin.qq.com/cgi-bin/message/template/send"


def test_environment_variables(monkeypatch):
    _clean_env(monkeypatch)
    monkeypatch.setenv("APPID", "wx-env")
    monkeypatch.setenv("SECRET", "secret-env")
    monkeypatch.setenv("USERID", "o-env")
    monkeypatch.setenv("TEMPLATE_ID", "T-env")
    monkeypatch.setenv("WXPUSH_TZ", "Europe/Berlin")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("ENV", "prod")

    s = Settings(_env_file=None)
    assert s.PORT == 8080
    assert s.is_prod and not s.is_dev
    assert s.process_defaults() == ProcessDefaults(
        app_id="wx-env",
        secret="secret-env",
        user_id="o-env",
        template_id="T-env",
        timezone="Europe/Berlin",
    )


def test_empty_port_falls_back_to_default(monkeypatch):
    _clean_env(monkeypatch)
    monkeypatch.setenv("PORT", "")
    assert Settings(_env_file=None).PORT == 5566


def test_env_file(tmp_path, monkeypatch):
    _clean_env(monkeypatch)
    env_file = tmp_path / ".env"
    env_file.write_text("APPID=wx-file\nBASE_URL=https://push.example.com\n", encoding="utf-8")
    s = Settings(_env_file=str(env_file))
    assert s.APPID == "wx-file"
    assert s.process_defaults().base_url == "https://push.example.com"


def test_keyword_overrides_beat_environment(monkeypatch):
    _clean_env(monkeypatch)
    monkeypatch.setenv("APPID", "wx-env")
    monkeypatch.setenv("WXPUSH_TZ", "Europe/Berlin")
    s = Settings(_env_file=None, APPID="wx-flag", WXPUSH_TZ="Asia/Tokyo")
    assert s.APPID == "wx-flag"
    assert s.TZ_NAME == "Asia/Tokyo"


def test_custom_api_base_trailing_slash(monkeypatch):
    _clean_env(monkeypatch)
    s = Settings(_env_file=None, WECHAT_API_BASE="http://mock.local:9000/")
    assert s.token_endpoint == "http://mock.local:9000/cgi-bin/stable_token"
