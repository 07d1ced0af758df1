from typing import Any, Dict, Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.shared.logging import get_logger

logger = get_logger(__name__)


# ───────────────────────── Base & Domain Exceptions ─────────────────────────
class DomainError(Exception):
    """Base class for domain-level errors. Services should raise these, never HTTPException."""
    code: str = "domain_error"
    status_code: int = status.HTTP_400_BAD_REQUEST
    message: str
    details: Optional[Dict[str, Any]]

    def __init__(
        self,
        message: str = "",
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message or self.__class__.__name__)
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.message = message or self.__class__.__name__
        self.details = details


# ───────────────────────────── Helpers ──────────────────────────────────────

def _problem(message: str) -> Dict[str, Any]:
    # Error contract: a single one-line "error" field
    return {"error": message}


def _extract_correlation_id(req: Request) -> Optional[str]:
    return getattr(getattr(req, "state", None), "correlation_id", None)

# ─────────────────────────── Registration ───────────────────────────

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def handle_app_error(req: Request, exc: DomainError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "request_failed",
            code=exc.code,
            status_code=exc.status_code,
            error=exc.message,
            details=exc.details or {},
            correlation_id=_extract_correlation_id(req),
        )
        return JSONResponse(status_code=exc.status_code, content=_problem(exc.message))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(req: Request, exc: StarletteHTTPException):
        detail = getattr(exc, "detail", None)
        return JSONResponse(
            status_code=exc.status_code,
            content=_problem(str(detail) if detail else "HTTP error"),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unhandled(req: Request, exc: Exception):
        logger.exception(
            "unhandled_error",
            type=exc.__class__.__name__,
            correlation_id=_extract_correlation_id(req),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_problem("Internal server error"),
        )
