"""
wxpush CLI: start the HTTP bridge.

Every flag is optional; a flag that is given wins over the matching
environment variable / .env entry, which wins over the built-in default.

    wxpush --appid wx123 --secret s3cr3t --userid o-openid --template_id T1 \\
           --base_url https://push.example.com --tz Asia/Shanghai --port 5566
"""

from __future__ import annotations

import argparse
from typing import Any, Dict, Optional

# flag -> Settings field (alias where the field has one)
FLAG_FIELDS = {
    "title": "TITLE",
    "content": "CONTENT",
    "appid": "APPID",
    "secret": "SECRET",
    "userid": "USERID",
    "template_id": "TEMPLATE_ID",
    "base_url": "BASE_URL",
    "tz": "WXPUSH_TZ",
    "port": "PORT",
    "host": "HOST",
    "log_level": "LOG_LEVEL",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wxpush",
        description="wxpush: WeChat template message bridge",
        argument_default=argparse.SUPPRESS,
    )
    parser.add_argument("--title", help="Default message title")
    parser.add_argument("--content", help="Default message content")
    parser.add_argument("--appid", help="Official account AppID")
    parser.add_argument("--secret", help="Official account AppSecret")
    parser.add_argument("--userid", help="Default recipient openid")
    parser.add_argument("--template_id", help="Default template ID")
    parser.add_argument("--base_url", help="Public base URL of this service (detail page links)")
    parser.add_argument("--tz", help="Time zone for detail timestamps (default: Asia/Shanghai)")
    parser.add_argument("--port", type=int, help="Listen port (default: 5566)")
    parser.add_argument("--host", help="Bind address (default: 0.0.0.0)")
    parser.add_argument("--log-level", dest="log_level", help="DEBUG|INFO|WARNING|ERROR")
    return parser


def settings_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Only flags that were actually passed become Settings kwargs."""
    given = vars(args)
    return {field: given[flag] for flag, field in FLAG_FIELDS.items() if flag in given}


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    import uvicorn

    from src.config import Settings
    from src.main import create_app
    from src.shared.logging import get_logger

    args = build_parser().parse_args(argv)
    settings = Settings(**settings_overrides(args))
    app = create_app(settings)
    logger = get_logger("src.cli")

    logger.info("server_starting", host=settings.HOST, port=settings.PORT)
    try:
        uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)
    except KeyboardInterrupt:
        logger.info("server_stopped")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
