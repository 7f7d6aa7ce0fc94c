from fastapi import APIRouter

from mediagate.api.v1.generate import router as generate_router
from mediagate.api.v1.media import router as media_router

api_v1_router = APIRouter(prefix="/api/v1")
api_v1_router.include_router(media_router)
api_v1_router.include_router(generate_router)
