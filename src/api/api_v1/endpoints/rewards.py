from typing import Optional

from fastapi import APIRouter

import schemas
from api.api_v1.deps import RewardStoreDep
from utils.date import parse_date

router = APIRouter()


@router.get(
    "/{user_id}/rewards",
    response_model=schemas.Rewards,
    responses={400: {"model": schemas.ErrorResponse}},
)
async def get_weekly_rewards(store: RewardStoreDep, user_id: str, at: Optional[str] = None):
    """
    Rewards of the Sunday-Saturday week containing `at`, creating the
    missing ones first.
    """
    reference_date = parse_date(at)
    rewards = store.get_weekly_rewards(user_id, reference_date)
    return {"data": rewards}


@router.patch(
    "/{user_id}/rewards/{date}/redeem",
    response_model=schemas.RedeemedReward,
    responses={
        400: {"model": schemas.ErrorResponse},
        404: {"model": schemas.ErrorResponse},
        409: {"model": schemas.ErrorResponse},
        410: {"model": schemas.ErrorResponse},
    },
)
async def redeem_reward(store: RewardStoreDep, user_id: str, date: str):
    target_date = parse_date(date)
    reward = store.redeem(user_id, target_date)
    return {"data": reward}
