from fastapi import APIRouter, Request

from app.core.config import settings

router = APIRouter()


@router.get("/")
async def health(request: Request):
    service = getattr(request.app.state, "conversation_service", None)
    return {
        "status": "ok",
        "message": f"{settings.STORE_NAME} bot running",
        "active_sessions": len(service.sessions) if service is not None else 0,
    }
