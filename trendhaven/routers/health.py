from fastapi import APIRouter

from trendhaven.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {"status": "ok", "name": settings.APP_NAME}
