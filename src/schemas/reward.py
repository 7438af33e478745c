from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from core.constants import ErrorKind


class Reward(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    available_at: datetime
    redeemed_at: Optional[datetime] = None
    expires_at: datetime


class Rewards(BaseModel):
    data: List[Reward]


class RedeemedReward(BaseModel):
    data: Reward


class ErrorDetail(BaseModel):
    kind: ErrorKind
    message: str


class ErrorResponse(BaseModel):
    error: ErrorDetail
