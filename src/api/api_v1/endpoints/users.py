from fastapi import APIRouter

from api.api_v1.endpoints import rewards

# user scoped routes; rewards live under /users/{user_id}/rewards
router = APIRouter()

router.include_router(rewards.router)
