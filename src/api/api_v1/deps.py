from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from core.config import settings
from core.constants import StoreBackend
from core.db import engine
from services.reward_store import RewardStore
from storage import InMemoryRewardRepository, RewardRepository, SqlRewardRepository


# one repository per process: the memory backend keeps its rewards and both
# backends keep their per-user locks between requests
@lru_cache
def get_reward_repository() -> RewardRepository:
    if settings.REWARD_STORE_BACKEND == StoreBackend.database:
        return SqlRewardRepository(engine)
    return InMemoryRewardRepository()


def get_reward_store(
    repository: Annotated[RewardRepository, Depends(get_reward_repository)],
) -> RewardStore:
    return RewardStore(repository, early_exit=settings.WEEK_POPULATION_EARLY_EXIT)


RewardStoreDep = Annotated[RewardStore, Depends(get_reward_store)]
