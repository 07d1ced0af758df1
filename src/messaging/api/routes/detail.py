from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["Messaging: Detail page"])

DETAIL_PAGE = Path(__file__).resolve().parent.parent / "static" / "msg_detail.html"


@lru_cache()
def _load_detail_page() -> bytes:
    return DETAIL_PAGE.read_bytes()


@router.get("/detail", response_class=HTMLResponse)
async def detail_page() -> HTMLResponse:
    """Static page; it renders title/message/date from its own query string."""
    return HTMLResponse(content=_load_detail_page(), media_type="text/html; charset=utf-8")
