from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/_health")
async def health(request: Request):
    settings = request.app.state.settings
    return {"service": settings.PROJECT_NAME, "status": "ok"}
