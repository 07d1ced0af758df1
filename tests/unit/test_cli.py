from src.cli import build_parser, main, settings_overrides
from src.config import Settings


def test_only_given_flags_become_overrides():
    args = build_parser().parse_args(["--appid", "wx1", "--tz", "Asia/Tokyo", "--port", "9000"])
    assert settings_overrides(args) == {"APPID": "wx1", "WXPUSH_TZ": "Asia/Tokyo", "PORT": 9000}


def test_no_flags_no_overrides():
    assert settings_overrides(build_parser().parse_args([])) == {}


def test_flags_override_environment(monkeypatch):
    monkeypatch.setenv("APPID", "wx-env")
    monkeypatch.setenv("SECRET", "secret-env")
    args = build_parser().parse_args(["--appid", "wx-flag", "--template_id", "T9", "--base_url", "https://b"])
    s = Settings(_env_file=None, **settings_overrides(args))
    assert s.APPID == "wx-flag"
    assert s.SECRET == "secret-env"
    assert s.TEMPLATE_ID == "T9"
    assert s.BASE_URL == "https://b"


def test_main_starts_uvicorn_with_configured_port(monkeypatch):
    captured = {}

    def fake_run(app, host, port, log_config):
        captured.update(app=app, host=host, port=port)

    monkeypatch.setattr("uvicorn.run", fake_run)
    assert main(["--port", "6001", "--host", "127.0.0.1"]) == 0
    assert captured["port"] == 6001
    assert captured["host"] == "127.0.0.1"
    assert captured["app"].state.settings.PORT == 6001


class RecordingLogger:
    def __init__(self):
        self.events = []

    def info(self, event, **kw):
        self.events.append((event, kw))


def test_main_logs_startup_and_stop(monkeypatch):
    log = RecordingLogger()

    def interrupted_run(app, host, port, log_config):
        raise KeyboardInterrupt

    monkeypatch.setattr("uvicorn.run", interrupted_run)
    monkeypatch.setattr("src.shared.logging.get_logger", lambda name: log)

    assert main(["--port", "6002", "--host", "127.0.0.1"]) == 0
    assert log.events == [
        ("server_starting", {"host": "127.0.0.1", "port": 6002}),
        ("server_stopped", {}),
    ]
