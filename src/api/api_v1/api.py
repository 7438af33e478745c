from fastapi import APIRouter

from api.api_v1.endpoints import (
    health,
    users,
)

api_router = APIRouter()

api_router.include_router(
    users.router, prefix="/users", tags=["rewards"]
)
api_router.include_router(
    health.router, prefix="/health"
)
api_router.redirect_slashes = False
